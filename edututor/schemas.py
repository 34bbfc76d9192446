# schemas.py
from datetime import datetime
from typing import List, Optional, Literal
from pydantic import BaseModel, Field, StrictInt
from pydantic.alias_generators import to_camel

LearningLevel = Literal["beginner", "intermediate", "advanced"]
PreferredStyle = Literal["explanatory", "examples", "practice"]


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class UserIn(CamelModel):
    email: str = Field(min_length=3, max_length=320)
    name: str = Field(min_length=1)


class UserOut(CamelModel):
    id: int
    email: str
    name: str


class ChatSendIn(CamelModel):
    message: str = Field(min_length=1)
    conversation_id: Optional[int] = None
    learning_level: Optional[LearningLevel] = None
    preferred_style: Optional[PreferredStyle] = None


class ChatSendOut(CamelModel):
    conversation_id: int
    message: str
    topic: str
    suggested_topics: List[str]


class ConversationOut(CamelModel):
    id: int
    user_id: int
    title: str
    topic: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MessageOut(CamelModel):
    id: int
    conversation_id: int
    role: str
    content: str
    created_at: Optional[datetime] = None


class QuestionOut(CamelModel):
    id: int
    question: str
    options: List[str]
    correct_answer: int


class QuizOut(CamelModel):
    id: int
    topic: str
    title: str
    questions: List[QuestionOut]
    created_at: Optional[datetime] = None


class QuizSubmitIn(CamelModel):
    # null marks an unanswered question
    answers: List[Optional[StrictInt]]


class QuizResultOut(CamelModel):
    score: int
    total_questions: int


class ProgressOut(CamelModel):
    id: int
    user_id: int
    topic: str
    progress: int
    last_studied: Optional[datetime] = None


class StatsOut(CamelModel):
    topics_learned: int
    average_score: int
    study_streak: Optional[int] = None


class AIStatusOut(CamelModel):
    available: bool
    message: str
