"""
Vocabulary and proficiency tests.

Covers the spaced-repetition model in content/vocabulary.py: promotion,
the retest/demotion path on failure, due checks and progress merging.
"""

from dataclasses import replace

import pytest

from packages.speller.content.vocabulary import (
    DAY_MS,
    HOUR_MS,
    INTERVALS_MS,
    MAX_PROFICIENCY,
    Vocabulary,
    is_due,
    merge_progress,
    update_proficiency,
)

NOW = 1_700_000_000_000


class TestCreate:

    def test_id_is_lower_cased_word(self):
        v = Vocabulary.create("  Hypothesis ")
        assert v.word == "Hypothesis"
        assert v.id == "hypothesis"
        assert v.proficiency == 0

    def test_difficulty_from_length(self):
        assert Vocabulary.create("apple").difficulty == "medium"
        assert Vocabulary.create("serendipity").difficulty == "long"
        assert Vocabulary.create("apple", difficulty="easy").difficulty == "easy"

    def test_dict_round_trip(self):
        v = replace(Vocabulary.create("ocean", "/o/", "sea"), proficiency=3, next_review=NOW)
        assert Vocabulary.from_dict(v.to_dict()) == v
        assert v.to_dict()["nextReview"] == NOW


class TestUpdateProficiency:

    def test_success_promotes_and_schedules(self):
        v = update_proficiency(Vocabulary.create("cat"), True, now=NOW)
        assert v.proficiency == 1
        assert v.next_review == NOW + INTERVALS_MS[1]
        assert v.last_review == NOW
        assert v.fail_streak == 0
        assert not v.is_retest

    def test_intervals(self):
        assert INTERVALS_MS[0] == 5 * HOUR_MS
        assert INTERVALS_MS[4] == 14 * DAY_MS

    def test_success_caps_at_max(self):
        v = replace(Vocabulary.create("cat"), proficiency=MAX_PROFICIENCY)
        v = update_proficiency(v, True, now=NOW)
        assert v.proficiency == MAX_PROFICIENCY
        assert v.next_review == NOW + INTERVALS_MS[-1]

    def test_first_failure_sets_retest(self):
        v = replace(Vocabulary.create("cat"), proficiency=3)
        v = update_proficiency(v, False, now=NOW)
        assert v.proficiency == 3
        assert v.is_retest
        assert v.fail_streak == 1
        assert v.next_review == NOW

    def test_failure_during_retest_demotes(self):
        v = replace(Vocabulary.create("cat"), proficiency=3, is_retest=True, fail_streak=1)
        v = update_proficiency(v, False, now=NOW)
        assert v.proficiency == 2
        assert not v.is_retest
        assert v.fail_streak == 0

    def test_failure_resets_mastery_streak(self):
        v = replace(Vocabulary.create("cat"), proficiency=3, mastery_streak=5)
        first = update_proficiency(v, False, now=NOW)
        assert first.mastery_streak == 3
        second = update_proficiency(first, False, now=NOW)
        assert second.mastery_streak == 2

    def test_demotion_floors_at_zero(self):
        v = replace(Vocabulary.create("cat"), is_retest=True)
        assert update_proficiency(v, False, now=NOW).proficiency == 0

    def test_success_clears_retest(self):
        v = replace(Vocabulary.create("cat"), proficiency=2, is_retest=True, fail_streak=1)
        v = update_proficiency(v, True, now=NOW)
        assert v.proficiency == 3
        assert not v.is_retest

    @pytest.mark.parametrize("results", [
        [True] * 10,
        [False] * 10,
        [True, False, False, True, False, True, True, False],
    ])
    def test_proficiency_stays_in_bounds(self, results):
        v = Vocabulary.create("bridge")
        for ok in results:
            v = update_proficiency(v, ok, now=NOW)
            assert 0 <= v.proficiency <= MAX_PROFICIENCY

    def test_input_not_mutated(self):
        v = Vocabulary.create("cat")
        update_proficiency(v, True, now=NOW)
        assert v.proficiency == 0


class TestDue:

    def test_new_word_is_not_due(self):
        assert not is_due(Vocabulary.create("cat"), NOW)

    def test_retest_always_due(self):
        assert is_due(replace(Vocabulary.create("cat"), is_retest=True), NOW)

    def test_due_after_next_review(self):
        v = replace(Vocabulary.create("cat"), proficiency=2, next_review=NOW - 1)
        assert is_due(v, NOW)
        assert not is_due(replace(v, next_review=NOW + 1), NOW)

    def test_mastered_word_never_due(self):
        v = replace(Vocabulary.create("cat"), proficiency=MAX_PROFICIENCY, next_review=NOW - 1)
        assert v.is_mastered
        assert not is_due(v, NOW)


class TestMergeProgress:

    def test_keeps_pack_text_and_saved_progress(self):
        base = Vocabulary.create("ocean", "/new/", "updated meaning")
        saved = replace(Vocabulary.create("ocean", "/old/", "old"), proficiency=4, next_review=NOW)
        merged = merge_progress(base, saved)
        assert merged.meaning == "updated meaning"
        assert merged.phonetic == "/new/"
        assert merged.proficiency == 4
        assert merged.next_review == NOW
