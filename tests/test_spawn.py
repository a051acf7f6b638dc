"""Tests for the procedural spawn policy."""

import math

import pytest

from geocache.core.errors import ConfigurationError
from geocache.core.models import Cell
from geocache.systems.luck import luck
from geocache.systems.spawn import SpawnPolicy, token_id


class TestSpawnDecision:

    def test_deterministic(self):
        policy = SpawnPolicy(0.1, 5)
        first = policy.should_spawn(Cell(3, -7))
        assert all(policy.should_spawn(Cell(3, -7)) is first for _ in range(10))

    def test_matches_luck_threshold(self):
        policy = SpawnPolicy(0.3, 5)
        for i in range(-5, 5):
            for j in range(-5, 5):
                assert policy.should_spawn(Cell(i, j)) == (luck(f"{i},{j}") < 0.3)

    def test_probability_bounds(self):
        cells = [Cell(i, j) for i in range(10) for j in range(10)]
        assert all(SpawnPolicy(1.0, 5).should_spawn(c) for c in cells)
        assert not any(SpawnPolicy(0.0, 5).should_spawn(c) for c in cells)

    def test_spawn_rate_near_probability(self):
        policy = SpawnPolicy(0.1, 5)
        cells = [Cell(i, j) for i in range(-50, 50) for j in range(-50, 50)]
        rate = sum(policy.should_spawn(c) for c in cells) / len(cells)
        assert 0.07 < rate < 0.13


class TestInitialContents:

    def test_count_range(self):
        policy = SpawnPolicy(1.0, 4)
        counts = {policy.initial_token_count(Cell(i, j)) for i in range(30) for j in range(30)}
        assert counts == {1, 2, 3, 4}

    def test_count_formula(self):
        policy = SpawnPolicy(1.0, 7)
        cell = Cell(2, 9)
        assert policy.initial_token_count(cell) == math.floor(luck("2,9,coinCount") * 7) + 1

    def test_mint_ids(self):
        policy = SpawnPolicy(1.0, 5)
        assert policy.mint_token_ids(Cell(-1, 4), 3) == ["coin--1:4#0", "coin--1:4#1", "coin--1:4#2"]
        assert token_id(Cell(3, -7), 0) == "coin-3:-7#0"

    def test_materialize(self):
        policy = SpawnPolicy(1.0, 5)
        cell = Cell(6, 6)
        cache = policy.materialize(cell)
        assert cache is not None
        assert cache.cell is cell
        assert list(cache.tokens) == policy.mint_token_ids(cell, policy.initial_token_count(cell))

    def test_materialize_nothing(self):
        assert SpawnPolicy(0.0, 5).materialize(Cell(0, 0)) is None

    def test_materialize_is_repeatable(self):
        policy = SpawnPolicy(0.5, 5)
        for i in range(10):
            a, b = policy.materialize(Cell(i, -i)), policy.materialize(Cell(i, -i))
            assert (a is None) == (b is None)
            if a is not None:
                assert a.tokens == b.tokens


class TestValidation:

    @pytest.mark.parametrize("probability", [-0.1, 1.5])
    def test_bad_probability(self, probability):
        with pytest.raises(ConfigurationError):
            SpawnPolicy(probability, 5)

    def test_bad_max_tokens(self):
        with pytest.raises(ConfigurationError):
            SpawnPolicy(0.1, 0)
