# storage.py
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from edututor import models
from edututor.db import SessionLocal, get_session
from edututor.errors import StorageUnavailable
from edututor.progress import upsert_progress
from edututor.scoring import validate_questions


def _label(topic) -> Optional[str]:
    if isinstance(topic, Enum):
        return topic.value
    return topic


class Storage:
    """CRUD over the SQLAlchemy models. Database failures surface as StorageUnavailable."""

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    @contextmanager
    def _session(self):
        with get_session(self.session_factory) as db:
            try:
                yield db
            except SQLAlchemyError as e:
                db.rollback()
                raise StorageUnavailable(str(e)) from e

    # ---- users ------------------------------------------------------------
    def get_user_by_id(self, user_id: int) -> Optional[models.User]:
        with self._session() as db:
            return db.get(models.User, user_id)

    def get_user_by_email(self, email: str) -> Optional[models.User]:
        with self._session() as db:
            return db.query(models.User).filter(models.User.email == email).first()

    def create_user(self, email: str, name: str, learning_preferences: Optional[dict] = None) -> models.User:
        with self._session() as db:
            user = models.User(email=email, name=name, learning_preferences=learning_preferences or {})
            db.add(user)
            db.commit()
            db.refresh(user)
            return user

    # ---- conversations ----------------------------------------------------
    def get_conversations_by_user_id(self, user_id: int) -> List[models.Conversation]:
        with self._session() as db:
            return (
                db.query(models.Conversation)
                .filter(models.Conversation.user_id == user_id)
                .order_by(models.Conversation.updated_at.desc(), models.Conversation.id.desc())
                .all()
            )

    def get_conversation_by_id(self, conversation_id: int) -> Optional[models.Conversation]:
        with self._session() as db:
            return db.get(models.Conversation, conversation_id)

    def create_conversation(self, user_id: int, title: str, topic=None) -> models.Conversation:
        with self._session() as db:
            conv = models.Conversation(user_id=user_id, title=title, topic=_label(topic))
            db.add(conv)
            db.commit()
            db.refresh(conv)
            return conv

    def set_conversation_topic(self, conversation_id: int, topic) -> None:
        with self._session() as db:
            conv = db.get(models.Conversation, conversation_id)
            if conv is not None:
                conv.topic = _label(topic)
                conv.updated_at = datetime.utcnow()
                db.commit()

    # ---- messages ---------------------------------------------------------
    def get_messages_by_conversation_id(self, conversation_id: int) -> List[models.Message]:
        with self._session() as db:
            return (
                db.query(models.Message)
                .filter(models.Message.conversation_id == conversation_id)
                .order_by(models.Message.created_at.asc(), models.Message.id.asc())
                .all()
            )

    def create_message(self, conversation_id: int, role: str, content: str) -> models.Message:
        with self._session() as db:
            msg = models.Message(conversation_id=conversation_id, role=role, content=content)
            db.add(msg)
            conv = db.get(models.Conversation, conversation_id)
            if conv is not None:
                conv.updated_at = datetime.utcnow()
            db.commit()
            db.refresh(msg)
            return msg

    # ---- quizzes ----------------------------------------------------------
    def get_quizzes(self) -> List[models.Quiz]:
        with self._session() as db:
            return db.query(models.Quiz).order_by(models.Quiz.id.asc()).all()

    def get_quiz_by_id(self, quiz_id: int) -> Optional[models.Quiz]:
        with self._session() as db:
            return db.get(models.Quiz, quiz_id)

    def create_quiz(self, topic, title: str, questions: List[dict]) -> models.Quiz:
        validate_questions(questions)
        with self._session() as db:
            quiz = models.Quiz(topic=_label(topic), title=title, questions=questions)
            db.add(quiz)
            db.commit()
            db.refresh(quiz)
            return quiz

    # ---- quiz attempts ----------------------------------------------------
    def get_quiz_attempts_by_user_id(self, user_id: int) -> List[models.QuizAttempt]:
        with self._session() as db:
            return (
                db.query(models.QuizAttempt)
                .filter(models.QuizAttempt.user_id == user_id)
                .order_by(models.QuizAttempt.completed_at.desc(), models.QuizAttempt.id.desc())
                .all()
            )

    def create_quiz_attempt(self, user_id: int, quiz_id: int, answers: List[Any], score: int) -> models.QuizAttempt:
        with self._session() as db:
            attempt = models.QuizAttempt(user_id=user_id, quiz_id=quiz_id, answers=list(answers), score=score)
            db.add(attempt)
            db.commit()
            db.refresh(attempt)
            return attempt

    # ---- progress ---------------------------------------------------------
    def get_user_progress(self, user_id: int) -> List[models.UserProgress]:
        with self._session() as db:
            return (
                db.query(models.UserProgress)
                .filter(models.UserProgress.user_id == user_id)
                .order_by(models.UserProgress.last_studied.desc(), models.UserProgress.id.desc())
                .all()
            )

    def update_user_progress(self, user_id: int, topic, progress: int) -> models.UserProgress:
        with self._session() as db:
            return upsert_progress(db, user_id, _label(topic), progress)
