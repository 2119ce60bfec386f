"""
Route blueprints.
"""
