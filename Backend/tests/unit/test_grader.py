# -*- coding: utf-8 -*-
"""
Unit tests for exact-set grading
"""

from types import SimpleNamespace

import pytest

from src.service.exams.grader import correct_indexes, grade
from src.utils.exceptions import MalformedQuestionError
from tests.fixtures import make_options


def _question(options, score=5.0):
    return SimpleNamespace(id=1, options=options, score=score)


class TestGrade:
    def test_exact_selection_gets_full_score(self):
        # Arrange
        question = _question(make_options(4, correct=(0, 2)), score=5.0)

        # Act
        result = grade(question, [2, 0])

        # Assert
        assert result.is_correct is True
        assert result.score == 5.0

    def test_subset_gets_nothing(self):
        question = _question(make_options(4, correct=(0, 2)))

        result = grade(question, [0])

        assert result.is_correct is False
        assert result.score == 0.0

    def test_superset_gets_nothing(self):
        question = _question(make_options(4, correct=(0, 2)))

        assert grade(question, [0, 1, 2]).score == 0.0

    def test_empty_selection_is_wrong(self):
        question = _question(make_options(3, correct=(1,)))

        assert grade(question, []).is_correct is False

    def test_out_of_range_index_is_wrong(self):
        question = _question(make_options(3, correct=(1,)))

        assert grade(question, [1, 7]).is_correct is False

    def test_duplicates_are_ignored(self):
        question = _question(make_options(3, correct=(1,)), score=2.5)

        assert grade(question, [1, 1]).score == 2.5


class TestCorrectIndexes:
    def test_correct_indexes(self):
        question = _question(make_options(5, correct=(1, 4)))

        assert correct_indexes(question) == frozenset({1, 4})

    def test_no_options(self):
        with pytest.raises(MalformedQuestionError):
            correct_indexes(_question([]))

    def test_no_correct_option(self):
        with pytest.raises(MalformedQuestionError):
            grade(_question(make_options(3, correct=())), [0])
