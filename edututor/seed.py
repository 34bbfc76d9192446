# seed.py
"""Sample data so a fresh database has a user, a quiz and some progress."""
import logging

from edututor.storage import Storage
from edututor.topics import Topic

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@example.com"

SAMPLE_QUIZZES = [
    {
        "topic": Topic.PYTHON,
        "title": "Python Functions Quiz",
        "questions": [
            {
                "id": 1,
                "question": "What is the correct syntax for defining a function in Python?",
                "options": [
                    "function myFunction():",
                    "def myFunction():",
                    "define myFunction():",
                    "func myFunction():",
                ],
                "correct_answer": 1,
            },
            {
                "id": 2,
                "question": "How do you call a function named 'greet' with parameter 'name'?",
                "options": [
                    "greet(name)",
                    "call greet(name)",
                    "execute greet(name)",
                    "run greet(name)",
                ],
                "correct_answer": 0,
            },
        ],
    },
]

SAMPLE_PROGRESS = [
    (Topic.PYTHON, 85),
    (Topic.WEB, 62),
    (Topic.DATA_SCIENCE, 43),
]


def seed_sample_data(storage: Storage) -> None:
    """Each part is checked separately, so an interrupted run is finished on the next one."""
    if not storage.get_quizzes():
        for quiz in SAMPLE_QUIZZES:
            storage.create_quiz(quiz["topic"], quiz["title"], quiz["questions"])

    user = storage.get_user_by_email(DEMO_EMAIL)
    if user is None:
        user = storage.create_user(
            DEMO_EMAIL, "Demo User",
            learning_preferences={"preferredSubjects": ["programming", "math"]},
        )
        logger.info("Seeded demo user %s (id=%s)", DEMO_EMAIL, user.id)

    existing = {p.topic for p in storage.get_user_progress(user.id)}
    for topic, value in SAMPLE_PROGRESS:
        if topic.value not in existing:
            storage.update_user_progress(user.id, topic, value)
