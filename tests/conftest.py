import pytest

from greenspark import create_app
from greenspark.utils import firestore_utils
from tests.fakes import MockFirestore

TEST_PASSWORD = 'password123'


@pytest.fixture(autouse=True)
def run_transactions_inline(monkeypatch):
    """The fake transaction applies writes directly, so skip the retry wrapper"""
    monkeypatch.setattr(firestore_utils.firestore, 'transactional', lambda fn: fn)


@pytest.fixture
def mock_firestore():
    """Mock Firestore database"""
    return MockFirestore()


@pytest.fixture
def app(mock_firestore, tmp_path):
    app = create_app({
        'TESTING': True,
        'ENVIRONMENT': 'development',
        'JWT_SECRET': 'test-secret',
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
        'LOG_LEVEL': 'WARNING',
    }, db=mock_firestore)
    return app


@pytest.fixture
def client(app):
    """Test client for Flask app"""
    with app.test_client() as client:
        yield client


@pytest.fixture
def services(app):
    return app.extensions['greenspark']


@pytest.fixture
def make_user(services, mock_firestore):
    """
    Create a user and return (user_id, auth headers).
    Extra fields are written straight onto the user document.
    """
    counter = {'n': 0}

    def _make_user(role='student', name=None, email=None, **fields):
        counter['n'] += 1
        name = name or f'{role.title()} {counter["n"]}'
        email = email or f'{role}{counter["n"]}@example.com'

        user = services['auth'].create_user(name, email, TEST_PASSWORD, role=role)
        if fields:
            mock_firestore.collection('users').document(user['id']).update(fields)

        token = services['auth'].issue_token(user['id'], role, name)
        return user['id'], {'Authorization': f'Bearer {token}'}

    return _make_user


@pytest.fixture
def student(make_user):
    return make_user('student', name='Sam Student', email='sam@example.com')


@pytest.fixture
def teacher(make_user):
    return make_user('teacher', name='Tara Teacher', email='tara@example.com')


@pytest.fixture
def admin(make_user):
    return make_user('admin', name='Ada Admin', email='ada@example.com')


@pytest.fixture
def sample_challenge(services):
    return services['challenges'].create_challenge(
        title='Plant a Tree',
        points=60,
        description='Plant a sapling',
        icon='🌱'
    )


@pytest.fixture
def sample_game(services, teacher):
    teacher_id, _ = teacher
    return services['games'].create_game({
        'title': 'Recycle Rush',
        'description': 'Sort the waste',
        'game_url': 'https://games.example.com/recycle-rush'
    }, uploaded_by=teacher_id)
