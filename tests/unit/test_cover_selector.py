"""
Unit tests for cover image selection.

The deterministic branch (up to three candidates) and the random branch
(more than three) are tested separately.
"""

import random

from web_metadata import DETERMINISTIC_LIMIT, CoverImageSelector, select_cover


class TestDeterministicBranch:
    """Three or fewer candidates always yield the first one."""

    def test_no_candidates(self):
        selection = CoverImageSelector().select([])
        assert selection.chosen_url == ""
        assert selection.is_empty

    def test_single_candidate(self):
        assert CoverImageSelector().select(["u1"]).chosen_url == "u1"

    def test_three_candidates_always_first(self):
        selector = CoverImageSelector()
        results = {selector.select(["u1", "u2", "u3"]).chosen_url for _ in range(100)}
        assert results == {"u1"}

    def test_limit_is_three(self):
        assert DETERMINISTIC_LIMIT == 3


class TestRandomBranch:
    """More than three candidates yield a random member."""

    CANDIDATES = ["u1", "u2", "u3", "u4", "u5", "u6"]

    def test_result_is_always_a_candidate(self):
        selector = CoverImageSelector()
        for _ in range(200):
            assert selector.select(self.CANDIDATES).chosen_url in self.CANDIDATES

    def test_four_candidates_can_vary(self):
        selector = CoverImageSelector(random.Random(7))
        results = {selector.select(["u1", "u2", "u3", "u4"]).chosen_url for _ in range(200)}
        assert len(results) > 1
        assert results <= {"u1", "u2", "u3", "u4"}

    def test_seeded_rng_is_reproducible(self):
        first = [CoverImageSelector(random.Random(123)).select(self.CANDIDATES).chosen_url for _ in range(5)]
        second = [CoverImageSelector(random.Random(123)).select(self.CANDIDATES).chosen_url for _ in range(5)]
        assert first == second

    def test_matches_injected_rng_choice(self):
        expected = random.Random(99).choice(self.CANDIDATES)
        assert select_cover(self.CANDIDATES, random.Random(99)).chosen_url == expected

    def test_duplicates_do_not_fabricate(self):
        candidates = ["a", "a", "a", "b"]
        selector = CoverImageSelector(random.Random(1))
        for _ in range(50):
            assert selector.select(candidates).chosen_url in ("a", "b")
