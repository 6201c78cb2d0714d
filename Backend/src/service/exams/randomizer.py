# -*- coding: utf-8 -*-
"""
Per-attempt randomization of question and option order.

The functions are pure: they take a ``random.Random`` (the module-level
generator when omitted) and never touch the database. Every call resamples,
so two attempts of the same exam get independent orders.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, Tuple

_default_rng = random.Random()


def _rng(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else _default_rng


def shuffle_questions(
    questions: Sequence[Any], rng: Optional[random.Random] = None
) -> List[int]:
    """
    Return the IDs of ``questions`` in a uniformly random order.

    Args:
        questions: Objects with an ``id`` attribute
        rng: Random source

    Returns:
        Shuffled question IDs
    """
    question_ids = [question.id for question in questions]
    # random.shuffle is a Fisher-Yates shuffle
    _rng(rng).shuffle(question_ids)
    return question_ids


def shuffle_options(question: Any, rng: Optional[random.Random] = None) -> List[int]:
    """
    Return a random permutation of the option indexes of ``question``.

    A question without options yields an empty permutation.
    """
    options = getattr(question, "options", None) or []
    permutation = list(range(len(options)))
    _rng(rng).shuffle(permutation)
    return permutation


@dataclass
class OptionOrderMap:
    """
    Ordered association of question ID to option permutation.

    Stored on the attempt as ``[[question_id, [i, j, ...]], ...]`` so the
    order of entries follows the question order of the attempt.
    """

    entries: List[Tuple[int, List[int]]] = field(default_factory=list)

    @classmethod
    def build(
        cls, questions: Iterable[Any], rng: Optional[random.Random] = None
    ) -> "OptionOrderMap":
        return cls(
            [(question.id, shuffle_options(question, rng)) for question in questions]
        )

    @classmethod
    def from_json(cls, raw: Optional[List[Any]]) -> "OptionOrderMap":
        entries: List[Tuple[int, List[int]]] = []
        for item in raw or []:
            question_id, permutation = item
            entries.append((int(question_id), [int(index) for index in permutation]))
        return cls(entries)

    def to_json(self) -> List[List[Any]]:
        return [
            [question_id, list(permutation)]
            for question_id, permutation in self.entries
        ]

    def get(self, question_id: int) -> Optional[List[int]]:
        for entry_id, permutation in self.entries:
            if entry_id == question_id:
                return permutation
        return None


def reconcile_permutation(
    permutation: Optional[Sequence[int]], option_count: int
) -> List[int]:
    """
    Fit a stored permutation to the current number of options.

    Indexes that no longer exist are dropped and new options are appended in
    their natural order, so the result always covers ``range(option_count)``
    exactly once.
    """
    seen = set()
    result = []
    for index in permutation or []:
        if 0 <= index < option_count and index not in seen:
            seen.add(index)
            result.append(index)
    result.extend(index for index in range(option_count) if index not in seen)
    return result
