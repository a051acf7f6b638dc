"""Tests for the deterministic luck hash."""

import os
import subprocess
import sys

import pytest

from geocache.systems.luck import LARGE_INTEGER, luck


class TestLuck:

    def test_same_key_same_value(self):
        assert luck("5,5") == luck("5,5")

    def test_stable_across_processes(self):
        root = os.path.join(os.path.dirname(__file__), "..")
        out = subprocess.run(
            [sys.executable, "-c", "from geocache.systems.luck import luck; print(repr(luck('5,5')))"],
            cwd=root,
            capture_output=True,
            text=True,
            check=True,
        )
        assert float(out.stdout.strip()) == luck("5,5")

    @pytest.mark.parametrize("key", ["", "0,0", "-3,7", "3,-7,coinCount", "ünïcode"])
    def test_range(self, key):
        value = luck(key)
        assert 0.0 <= value < 1.0

    def test_granularity(self):
        # Every value is k / 2**30 for an integer k
        value = luck("12,34")
        assert (value * LARGE_INTEGER).is_integer()

    def test_different_keys_differ(self):
        values = {luck(f"{i},{j}") for i in range(20) for j in range(20)}
        assert len(values) > 390

    def test_roughly_uniform(self):
        values = [luck(f"{i},{j}") for i in range(-50, 50) for j in range(-50, 50)]
        mean = sum(values) / len(values)
        assert 0.45 < mean < 0.55
        below_tenth = sum(1 for v in values if v < 0.1) / len(values)
        assert 0.07 < below_tenth < 0.13
