# errors.py
class TutorError(Exception):
    pass


class MalformedSubmission(TutorError):
    """Quiz answers do not line up with the quiz's questions."""


class QuizNotFound(TutorError):
    pass


class ConversationNotFound(TutorError):
    pass


class StorageUnavailable(TutorError):
    """The database could not be reached or rejected the operation."""


class InvalidQuiz(TutorError):
    """A question's correct_answer does not point at one of its options."""
