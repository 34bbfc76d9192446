"""EduTutor: rule-based AI tutor, quizzes and topic progress."""
__version__ = "0.1.0"
