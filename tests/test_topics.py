# tests/test_topics.py
import pytest

from edututor.topics import Topic, classify


@pytest.mark.parametrize("message", [
    "Tell me about Python",
    "I love PYTHON",
    "python lists please",
])
def test_python_messages(message):
    assert classify(message) == Topic.PYTHON


def test_empty_message_is_general():
    assert classify("") == Topic.GENERAL


def test_no_keywords_is_general():
    assert classify("How should I revise for exams?") == Topic.GENERAL


@pytest.mark.parametrize("message,expected", [
    ("How do I center a div with CSS?", Topic.WEB),
    ("What is React?", Topic.WEB),
    ("Explain machine learning", Topic.DATA_SCIENCE),
    ("I need help with statistics", Topic.DATA_SCIENCE),
    ("Help me with calculus", Topic.MATH),
    ("geometry homework", Topic.MATH),
])
def test_each_topic(message, expected):
    assert classify(message) == expected


def test_first_matching_topic_wins():
    """'code' (Python) is checked before 'html' (Web)."""
    assert classify("html code") == Topic.PYTHON
    # 'data' (Data Science) beats 'algebra' (Mathematics)
    assert classify("algebra on data") == Topic.DATA_SCIENCE


def test_substring_matching():
    # "website" contains "web"; "functional" contains "function"
    assert classify("my website") == Topic.WEB
    assert classify("functional style") == Topic.PYTHON


def test_parse_known_and_unknown_labels():
    assert Topic.parse("Mathematics") == Topic.MATH
    assert Topic.parse("Underwater Basket Weaving") == Topic.GENERAL
