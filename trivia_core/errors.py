"""Exceptions raised by the quiz core.

Library code raises these; the HTTP layer and the CLI turn them into notices.
Only :class:`DatasetLoadError` is fatal, and only to startup.
"""
from __future__ import annotations


class QuizError(Exception):
    """Base class for every error the core raises on purpose."""


class DatasetLoadError(QuizError):
    """The dataset could not be read or parsed."""


class SelectionError(QuizError):
    """No categories (or unknown categories) were selected."""


class EmptyPoolError(QuizError):
    """The selected categories yield no questions."""


class SessionStateError(QuizError):
    """The operation is not valid in the session's current phase."""


class AnswerRejected(SessionStateError):
    """A submission or advance was refused; nothing changed."""


__all__ = [
    "QuizError",
    "DatasetLoadError",
    "SelectionError",
    "EmptyPoolError",
    "SessionStateError",
    "AnswerRejected",
]
