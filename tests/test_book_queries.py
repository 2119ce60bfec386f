import pytest

from bookstore import db
from bookstore.core.exceptions import UnknownFieldError
from bookstore.models import Book
from bookstore.services import book_queries


def titles(rows):
    return [row['title'] for row in rows]


def test_count_books(seeded):
    assert book_queries.count_books() == 5
    assert book_queries.count_books(Book.genre == 'Fiction') == 2
    assert book_queries.count_books(Book.genre == 'Poetry') == 0


def test_equality_and_range_filters(seeded):
    assert titles(book_queries.find_books(Book.genre == 'Fiction')) == ['Alpha', 'Beta']
    assert titles(book_queries.find_books(Book.published_year > 2010)) == ['Gamma', 'Delta']
    assert titles(book_queries.find_books(Book.author == 'Ann')) == ['Alpha', 'Beta', 'Epsilon']


def test_criteria_are_combined_with_and(seeded):
    rows = book_queries.find_books(Book.in_stock.is_(True), Book.published_year > 2010)
    assert titles(rows) == ['Gamma']
    assert book_queries.count_books(Book.in_stock.is_(True), Book.published_year > 2010) == 1


def test_full_documents_include_id(seeded):
    alpha = book_queries.find_books(Book.title == 'Alpha')[0]
    assert alpha['id'] is not None
    assert alpha['price'] == 10.0
    assert alpha['in_stock'] is True


def test_projection_excludes_id(seeded):
    rows = book_queries.find_books(Book.genre == 'Fiction', fields=['title', 'author', 'price'])
    assert rows == [
        {'title': 'Alpha', 'author': 'Ann', 'price': 10.0},
        {'title': 'Beta', 'author': 'Ann', 'price': 20.0},
    ]


def test_projection_can_include_id(seeded):
    rows = book_queries.find_books(Book.title == 'Alpha', fields=['id', 'title'])
    assert list(rows[0]) == ['id', 'title']
    assert rows[0]['id'] == book_queries.find_one(Book.title == 'Alpha')['id']


def test_exclusion_projection_keeps_id(seeded):
    rows = book_queries.find_books(Book.title == 'Gamma', exclude=['pages', 'in_stock'])
    assert set(rows[0]) == {'id', 'title', 'author', 'genre', 'published_year', 'price'}
    assert rows[0]['price'] == 30.0


def test_exclusion_projection_can_drop_id(seeded):
    rows = book_queries.paginate_books(1, 2, exclude=['id', 'pages'])
    assert rows[0] == {'title': 'Alpha', 'author': 'Ann', 'genre': 'Fiction',
                       'published_year': 1999, 'price': 10.0, 'in_stock': True}
    assert len(rows) == 2


def test_projection_cannot_mix_inclusion_and_exclusion(seeded):
    with pytest.raises(ValueError):
        book_queries.find_books(fields=['title'], exclude=['pages'])
    with pytest.raises(ValueError):
        book_queries.find_books(exclude=['id', *Book.FIELDS])


def test_unknown_projection_field(seeded):
    with pytest.raises(UnknownFieldError):
        book_queries.find_books(fields=['title', 'isbn'])
    with pytest.raises(UnknownFieldError):
        book_queries.find_books(exclude=['isbn'])


def test_sorting(seeded):
    ascending = book_queries.find_books(fields=['title', 'price'], order_by=Book.price.asc())
    descending = book_queries.find_books(fields=['title', 'price'], order_by=Book.price.desc())
    assert titles(ascending) == ['Alpha', 'Epsilon', 'Delta', 'Beta', 'Gamma']
    assert titles(descending) == ['Gamma', 'Beta', 'Delta', 'Epsilon', 'Alpha']


def test_sort_key():
    assert str(book_queries.sort_key('-price')).endswith('DESC')
    assert str(book_queries.sort_key('price')).endswith('ASC')
    with pytest.raises(UnknownFieldError):
        book_queries.sort_key('-rating')


def test_skip_and_limit(seeded):
    rows = book_queries.find_books(fields=['title'], skip=1, limit=2)
    assert titles(rows) == ['Beta', 'Gamma']


def test_pagination(seeded):
    pages = [titles(book_queries.paginate_books(n, 2, fields=['title'])) for n in range(1, 5)]
    assert pages == [['Alpha', 'Beta'], ['Gamma', 'Delta'], ['Epsilon'], []]


def test_pagination_with_sort_and_criteria(seeded):
    rows = book_queries.paginate_books(1, 1, order_by=Book.price.desc(),
                                       criteria=[Book.genre == 'Fiction'])
    assert titles(rows) == ['Beta']


@pytest.mark.parametrize('page, per_page', [(0, 5), (-1, 5), (1, 0)])
def test_pagination_rejects_bad_pages(seeded, page, per_page):
    with pytest.raises(ValueError):
        book_queries.paginate_books(page, per_page)


def test_find_one(seeded):
    assert book_queries.find_one()['title'] == 'Alpha'
    assert book_queries.find_one(Book.genre == 'Sci-Fi')['title'] == 'Gamma'
    assert book_queries.find_one(Book.title == 'Omega') is None


def test_update_price(seeded):
    result = book_queries.update_price('Alpha', 15.99)
    assert (result.matched_count, result.modified_count) == (1, 1)
    assert book_queries.find_one(Book.title == 'Alpha')['price'] == 15.99

    unchanged = book_queries.update_price('Alpha', 15.99)
    assert (unchanged.matched_count, unchanged.modified_count) == (1, 0)


def test_update_price_missing_title(seeded):
    result = book_queries.update_price('Omega', 1.0)
    assert (result.matched_count, result.modified_count) == (0, 0)


def test_update_touches_only_the_first_match(seeded):
    db.session.add(Book(title='Alpha', author='Zed', price=10.0))
    db.session.commit()

    book_queries.update_price('Alpha', 99.0)

    prices = [row['price'] for row in book_queries.find_books(Book.title == 'Alpha')]
    assert prices == [99.0, 10.0]


def test_delete_by_title(seeded):
    assert book_queries.delete_by_title('Beta').deleted_count == 1
    assert book_queries.count_books() == 4
    assert book_queries.find_books(Book.title == 'Beta') == []


def test_delete_missing_title_is_not_an_error(seeded):
    assert book_queries.delete_by_title('Omega').deleted_count == 0
    assert book_queries.count_books() == 5


def test_distinct_values(seeded):
    assert book_queries.distinct_values('genre') == ['Fiction', 'History', 'Sci-Fi']
    with pytest.raises(UnknownFieldError):
        book_queries.distinct_values('publisher')


def test_list_collections(seeded):
    assert 'books' in book_queries.list_collections()
