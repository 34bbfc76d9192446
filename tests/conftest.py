import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from edututor.db import init_db, make_session_factory
from edututor.main import create_app
from edututor.seed import SAMPLE_QUIZZES
from edututor.storage import Storage
from edututor.topics import Topic
from edututor.tutor import TutorService


@pytest.fixture
def engine():
    """In-memory SQLite shared across threads (TestClient runs handlers in a threadpool)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def storage(engine):
    return Storage(make_session_factory(engine))


@pytest.fixture
def user(storage):
    return storage.create_user("student@example.com", "Student")


@pytest.fixture
def python_quiz(storage):
    quiz = SAMPLE_QUIZZES[0]
    return storage.create_quiz(Topic.PYTHON, quiz["title"], quiz["questions"])


@pytest.fixture
def tutor(storage):
    return TutorService(storage)


@pytest.fixture
def client(tutor):
    return TestClient(create_app(tutor))


@pytest.fixture
def auth(user):
    return {"X-User-Id": str(user.id)}
