# -*- coding: utf-8 -*-
"""
Unit tests for question and option shuffling
"""

import random
from collections import Counter
from types import SimpleNamespace

from src.service.exams.randomizer import (OptionOrderMap,
                                          reconcile_permutation,
                                          shuffle_options, shuffle_questions)
from tests.fixtures import make_options


def _question(question_id, option_count=4):
    return SimpleNamespace(id=question_id, options=make_options(option_count), score=1.0)


class TestShuffleQuestions:
    def test_result_is_permutation_of_ids(self):
        # Arrange
        questions = [_question(question_id) for question_id in (11, 12, 13, 14, 15)]

        # Act
        order = shuffle_questions(questions, random.Random(7))

        # Assert
        assert sorted(order) == [11, 12, 13, 14, 15]
        assert len(order) == len(set(order))

    def test_same_seed_gives_same_order(self):
        questions = [_question(question_id) for question_id in range(1, 21)]

        first = shuffle_questions(questions, random.Random(42))
        second = shuffle_questions(questions, random.Random(42))

        assert first == second

    def test_input_is_not_mutated(self):
        questions = [_question(question_id) for question_id in range(1, 6)]
        ids_before = [question.id for question in questions]

        shuffle_questions(questions, random.Random(3))

        assert [question.id for question in questions] == ids_before

    def test_empty_and_single(self):
        assert shuffle_questions([], random.Random(1)) == []
        assert shuffle_questions([_question(9)], random.Random(1)) == [9]

    def test_every_question_reaches_first_position(self):
        # Arrange
        questions = [_question(question_id) for question_id in (1, 2, 3)]
        rng = random.Random(2024)

        # Act
        firsts = Counter(shuffle_questions(questions, rng)[0] for _ in range(3000))

        # Assert
        assert set(firsts) == {1, 2, 3}
        for count in firsts.values():
            assert 800 < count < 1200


class TestShuffleOptions:
    def test_permutation_of_option_indexes(self):
        permutation = shuffle_options(_question(1, option_count=5), random.Random(5))

        assert sorted(permutation) == [0, 1, 2, 3, 4]

    def test_question_without_options(self):
        question = SimpleNamespace(id=1, options=[], score=1.0)

        assert shuffle_options(question, random.Random(5)) == []

    def test_default_generator_is_used_without_rng(self):
        permutation = shuffle_options(_question(1, option_count=3))

        assert sorted(permutation) == [0, 1, 2]


class TestOptionOrderMap:
    def test_build_follows_question_order(self):
        # Arrange
        questions = [_question(30), _question(10, option_count=2), _question(20)]

        # Act
        option_order = OptionOrderMap.build(questions, random.Random(1))

        # Assert
        assert [question_id for question_id, _ in option_order.entries] == [30, 10, 20]
        assert sorted(option_order.get(10)) == [0, 1]

    def test_json_form_keeps_entry_order(self):
        option_order = OptionOrderMap([(5, [2, 0, 1]), (3, [1, 0])])

        raw = option_order.to_json()
        restored = OptionOrderMap.from_json(raw)

        assert raw == [[5, [2, 0, 1]], [3, [1, 0]]]
        assert restored.entries == [(5, [2, 0, 1]), (3, [1, 0])]

    def test_missing_question(self):
        assert OptionOrderMap.from_json(None).get(1) is None


class TestReconcilePermutation:
    def test_unchanged_options(self):
        assert reconcile_permutation([2, 0, 1], 3) == [2, 0, 1]

    def test_removed_option_is_dropped(self):
        assert reconcile_permutation([3, 0, 2, 1], 3) == [0, 2, 1]

    def test_added_options_are_appended(self):
        assert reconcile_permutation([1, 0], 4) == [1, 0, 2, 3]

    def test_no_stored_permutation(self):
        assert reconcile_permutation(None, 3) == [0, 1, 2]
