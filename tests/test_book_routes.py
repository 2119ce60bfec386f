def test_list_books(client):
    response = client.get('/api/books?genre=Fiction')
    assert response.status_code == 200
    data = response.get_json()
    assert data['total'] == 2
    assert [book['title'] for book in data['books']] == ['Alpha', 'Beta']


def test_list_books_projection_and_sort(client):
    response = client.get('/api/books?fields=title,price&sort=-price')
    books = response.get_json()['books']
    assert books[0] == {'title': 'Gamma', 'price': 30.0}
    assert [book['title'] for book in books][-1] == 'Alpha'


def test_list_books_exclusion(client):
    response = client.get('/api/books?genre=History&exclude=id,pages,in_stock')
    assert response.get_json()['books'] == [{
        'title': 'Epsilon', 'author': 'Ann', 'genre': 'History',
        'published_year': 1987, 'price': 12.5,
    }]


def test_list_books_filters(client):
    response = client.get('/api/books?published_after=2010&in_stock=true')
    data = response.get_json()
    assert data['total'] == 1
    assert data['books'][0]['title'] == 'Gamma'


def test_list_books_pagination(client):
    response = client.get('/api/books?page=2&per_page=2&fields=title')
    data = response.get_json()
    assert data['books'] == [{'title': 'Gamma'}, {'title': 'Delta'}]
    assert data['total'] == 5


def test_list_books_bad_parameters(client):
    for query in ('published_after=soon', 'fields=isbn', 'sort=-rating',
                  'in_stock=maybe', 'page=0', 'fields=title&exclude=pages'):
        response = client.get(f'/api/books?{query}')
        assert response.status_code == 400, query
        assert 'error' in response.get_json()


def test_stats(client):
    response = client.get('/api/books/stats/summary')
    assert response.status_code == 200
    assert response.get_json()['results']['total_books'] == 5

    genres = client.get('/api/books/stats/genres').get_json()['results']
    assert genres[0]['genre'] == 'Sci-Fi'


def test_unknown_stat(client):
    response = client.get('/api/books/stats/median')
    assert response.status_code == 404
    assert 'summary' in response.get_json()['available']


def test_indexes(client):
    response = client.get('/api/indexes')
    assert response.status_code == 200
    assert response.get_json()['indexes'][0]['name'] == 'primary'
