"""Tests for the seedable random source."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from collections import Counter

from engine.random_source import RandomSource


class TestRandomSource:
    def test_seed_generated_when_missing(self):
        assert isinstance(RandomSource().seed, int)

    def test_same_seed_same_sequence(self):
        a, b = RandomSource(42), RandomSource(42)
        items = list(range(20))
        assert a.shuffle(items) == b.shuffle(items)
        assert a.pick(items) == b.pick(items)

    def test_shuffle_returns_copy(self):
        items = [1, 2, 3, 4]
        shuffled = RandomSource(1).shuffle(items)
        assert items == [1, 2, 3, 4]
        assert sorted(shuffled) == items

    def test_pick_empty_is_none(self):
        assert RandomSource(1).pick([]) is None

    def test_pick_is_roughly_uniform(self):
        rng = RandomSource(2024)
        counts = Counter(rng.pick("abcd") for _ in range(8000))
        assert set(counts) == set("abcd")
        for n in counts.values():
            assert 1700 < n < 2300

    def test_first_position_after_shuffle_is_roughly_uniform(self):
        rng = RandomSource(7)
        counts = Counter(rng.shuffle([0, 1, 2])[0] for _ in range(6000))
        for n in counts.values():
            assert 1700 < n < 2300
