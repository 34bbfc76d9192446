# topics.py
from enum import Enum


class Topic(str, Enum):
    PYTHON = "Python Programming"
    WEB = "Web Development"
    DATA_SCIENCE = "Data Science"
    MATH = "Mathematics"
    GENERAL = "General"

    @classmethod
    def parse(cls, label: str) -> "Topic":
        """Map a stored/free-text topic label onto a Topic (General if unknown)."""
        try:
            return cls(label)
        except ValueError:
            return cls.GENERAL


# Checked in this order; the first topic with a matching keyword wins.
TOPIC_KEYWORDS = [
    (Topic.PYTHON, ("python", "programming", "code", "function", "variable", "loop")),
    (Topic.WEB, ("web", "html", "css", "javascript", "react", "frontend")),
    (Topic.DATA_SCIENCE, ("data", "science", "analytics", "statistics", "machine learning")),
    (Topic.MATH, ("math", "mathematics", "algebra", "geometry", "calculus")),
]


def classify(message: str) -> Topic:
    text = (message or "").lower()
    for topic, keywords in TOPIC_KEYWORDS:
        if any(k in text for k in keywords):
            return topic
    return Topic.GENERAL
