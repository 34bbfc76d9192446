# tests/test_storage.py
import pytest
from sqlalchemy import create_engine

from edututor.db import make_session_factory
from edututor.errors import InvalidQuiz, StorageUnavailable
from edututor.progress import clamp_progress, next_chat_progress
from edututor.storage import Storage
from edututor.topics import Topic


def test_progress_clamped_to_100(storage, user):
    row = storage.update_user_progress(user.id, "Math", 150)
    assert row.progress == 100
    assert storage.get_user_progress(user.id)[0].progress == 100


def test_progress_set_not_incremented(storage, user):
    storage.update_user_progress(user.id, Topic.PYTHON, 40)
    storage.update_user_progress(user.id, Topic.PYTHON, 30)
    rows = storage.get_user_progress(user.id)
    assert len(rows) == 1
    assert rows[0].progress == 30
    assert rows[0].topic == "Python Programming"


def test_progress_refreshes_last_studied(storage, user):
    first = storage.update_user_progress(user.id, Topic.WEB, 10)
    second = storage.update_user_progress(user.id, Topic.WEB, 20)
    assert first.id == second.id
    assert second.last_studied >= first.last_studied


def test_progress_is_per_user_and_topic(storage, user):
    other = storage.create_user("other@example.com", "Other")
    storage.update_user_progress(user.id, Topic.MATH, 10)
    storage.update_user_progress(user.id, Topic.WEB, 20)
    storage.update_user_progress(other.id, Topic.MATH, 30)
    mine = {p.topic: p.progress for p in storage.get_user_progress(user.id)}
    assert mine == {"Mathematics": 10, "Web Development": 20}


def test_clamp_and_increment():
    assert clamp_progress(-5) == 0
    assert clamp_progress(42) == 42
    assert next_chat_progress(0) == 5
    assert next_chat_progress(97) == 100


def test_messages_come_back_oldest_first(storage, user):
    conv = storage.create_conversation(user.id, "Loops...", topic=None)
    storage.create_message(conv.id, "user", "first")
    storage.create_message(conv.id, "assistant", "second")
    assert [m.content for m in storage.get_messages_by_conversation_id(conv.id)] == ["first", "second"]


def test_conversation_topic(storage, user):
    conv = storage.create_conversation(user.id, "t", topic=None)
    assert conv.topic is None
    storage.set_conversation_topic(conv.id, Topic.DATA_SCIENCE)
    assert storage.get_conversation_by_id(conv.id).topic == "Data Science"


def test_quiz_round_trip(storage, python_quiz):
    quiz = storage.get_quiz_by_id(python_quiz.id)
    assert quiz.topic == "Python Programming"
    assert quiz.questions[0]["correct_answer"] == 1
    assert storage.get_quiz_by_id(999) is None
    assert [q.id for q in storage.get_quizzes()] == [python_quiz.id]


def test_quiz_attempts(storage, user, python_quiz):
    storage.create_quiz_attempt(user.id, python_quiz.id, [1, 0], 100)
    attempts = storage.get_quiz_attempts_by_user_id(user.id)
    assert len(attempts) == 1
    assert attempts[0].answers == [1, 0]


def test_unreachable_database_raises_storage_unavailable(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path}/missing/dir/tutor.db")
    broken = Storage(make_session_factory(engine))
    with pytest.raises(StorageUnavailable):
        broken.get_user_progress(1)
    with pytest.raises(StorageUnavailable):
        broken.update_user_progress(1, Topic.MATH, 10)


def test_quiz_with_out_of_range_answer_rejected(storage):
    questions = [{"id": 1, "question": "2 + 2?", "options": ["3", "4"], "correct_answer": 4}]
    with pytest.raises(InvalidQuiz):
        storage.create_quiz(Topic.MATH, "Broken", questions)
    assert storage.get_quizzes() == []
