"""Shared fixtures: a testing app on in-memory SQLite and a JSON file store"""
import pytest
from gsm import create_app, db
from gsm.services import SchemeBook
from gsm.storage import JsonRepository

PRICES = {'KHSS': 1000, 'DSS': 2000, 'Finance': 5000}


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        app.extensions['scheme_book'].seed()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / 'gsm_store.json'


def make_json_book(path, **options):
    book = SchemeBook(JsonRepository(str(path)), default_prices=PRICES,
                      initial_admin=('admin', 'admin123'), **options)
    book.seed()
    return book


@pytest.fixture(params=['sql', 'json'])
def book(request, store_path):
    """The scheme book on each storage backend"""
    if request.param == 'sql':
        app = request.getfixturevalue('app')
        return app.extensions['scheme_book']
    return make_json_book(store_path)


@pytest.fixture
def book_factory(request, store_path):
    """Build a scheme book with non-default policies on either backend"""
    def factory(backend='json', **options):
        if backend == 'sql':
            app = request.getfixturevalue('app')
            return SchemeBook(app.extensions['scheme_book'].repository, default_prices=PRICES, **options)
        return make_json_book(store_path, **options)
    return factory


def login(client, username='admin', password='admin123'):
    return client.post('/auth/login', data={'username': username, 'password': password},
                       follow_redirects=True)
