# tutor.py
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Sequence

from edututor.errors import ConversationNotFound, QuizNotFound
from edututor.progress import next_chat_progress
from edututor.responses import ConversationContext, generate
from edututor.scoring import QuizResult, percentage, score_quiz, validate_submission
from edututor.storage import Storage
from edututor.topics import Topic, classify

logger = logging.getLogger(__name__)

TITLE_LENGTH = 50


@dataclass
class ChatTurn:
    conversation_id: int
    reply_text: str
    topic: Topic
    suggested_topics: List[str]


class TutorService:
    """
    Entry point for request handlers: chat turns, quiz submissions and stats.
    Built once at startup with its storage and (optional) text generator.
    """

    def __init__(self, storage: Storage, external_generate: Optional[Callable[[str], str]] = None):
        self.storage = storage
        self.external_generate = external_generate

    def _resolve_conversation(self, user_id: int, message: str, conversation_id: Optional[int]):
        if conversation_id is not None:
            conv = self.storage.get_conversation_by_id(conversation_id)
            if conv is None or conv.user_id != user_id:
                raise ConversationNotFound(f"Conversation {conversation_id} not found")
            return conv
        return self.storage.create_conversation(user_id, message[:TITLE_LENGTH] + "...", topic=None)

    def handle_chat_turn(
        self,
        user_id: int,
        message: str,
        conversation_id: Optional[int] = None,
        context: Optional[ConversationContext] = None,
    ) -> ChatTurn:
        conv = self._resolve_conversation(user_id, message, conversation_id)

        context = context or ConversationContext()
        if conversation_id is not None and not context.previous_messages:
            history = self.storage.get_messages_by_conversation_id(conv.id)
            context = replace(context, previous_messages=[m.content for m in history if m.role == "user"])

        # The user's message is stored before any generation is attempted
        self.storage.create_message(conv.id, "user", message)

        topic = classify(message)
        reply = generate(message, topic, self.external_generate, context)

        self.storage.create_message(conv.id, "assistant", reply.content)
        if not conv.topic:
            self.storage.set_conversation_topic(conv.id, topic)

        current = next((p.progress for p in self.storage.get_user_progress(user_id) if p.topic == topic.value), 0)
        self.storage.update_user_progress(user_id, topic, next_chat_progress(current))
        logger.info("[chat] user=%s conversation=%s topic=%s", user_id, conv.id, topic.value)

        return ChatTurn(
            conversation_id=conv.id,
            reply_text=reply.content,
            topic=topic,
            suggested_topics=reply.suggested_topics,
        )

    def submit_quiz(self, user_id: int, quiz_id: int, answers: Sequence[Any]) -> QuizResult:
        quiz = self.storage.get_quiz_by_id(quiz_id)
        if quiz is None:
            raise QuizNotFound(f"Quiz {quiz_id} not found")

        questions = quiz.questions or []
        validate_submission(questions, answers)
        result = score_quiz(questions, answers)

        self.storage.create_quiz_attempt(user_id, quiz.id, answers, result.score)
        # A quiz score replaces the topic's progress outright
        self.storage.update_user_progress(user_id, quiz.topic, result.score)
        logger.info("[quiz] user=%s quiz=%s score=%s", user_id, quiz.id, result.score)
        return result

    def get_stats(self, user_id: int) -> dict:
        progress = self.storage.get_user_progress(user_id)
        attempts = self.storage.get_quiz_attempts_by_user_id(user_id)
        return {
            "topics_learned": len(progress),
            "average_score": percentage(sum(a.score for a in attempts), len(attempts) * 100),
            # TODO: derive the streak from consecutive days with messages or quiz attempts
            "study_streak": None,
        }

    def ai_status(self) -> dict:
        status = getattr(self.external_generate, "status", None)
        if status is not None:
            return status()
        if self.external_generate is not None:
            return {"available": True, "message": "External AI tutoring is configured."}
        return {
            "available": False,
            "message": "Using smart educational responses. Add GOOGLE_API_KEY or HUGGING_FACE_API_KEY for enhanced AI tutoring.",
        }
