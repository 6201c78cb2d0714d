# -*- coding: utf-8 -*-
"""
Exact-set grading of multiple choice questions.
"""

from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable

from src.utils.exceptions import MalformedQuestionError


@dataclass(frozen=True)
class GradeResult:
    is_correct: bool
    score: float


def correct_indexes(question: Any) -> FrozenSet[int]:
    """
    Indexes of the options marked correct.

    Raises:
        MalformedQuestionError: The question has no options or no correct option
    """
    options = getattr(question, "options", None) or []
    if not options:
        raise MalformedQuestionError(getattr(question, "id", None), "no options")
    correct = frozenset(
        index for index, option in enumerate(options) if option.get("is_correct")
    )
    if not correct:
        raise MalformedQuestionError(getattr(question, "id", None), "no correct option")
    return correct


def grade(question: Any, selected_indexes: Iterable[int]) -> GradeResult:
    """
    Grade one answer.

    The answer is correct only when the selected indexes are exactly the
    correct ones; there is no partial credit.

    Args:
        question: Object with ``options`` (``[{"text", "is_correct"}]``) and ``score``
        selected_indexes: Option indexes chosen by the user

    Returns:
        GradeResult with the full question score or 0
    """
    is_correct = frozenset(selected_indexes) == correct_indexes(question)
    score = float(question.score or 0) if is_correct else 0.0
    return GradeResult(is_correct=is_correct, score=score)
