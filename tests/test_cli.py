"""Tests for the command-line entry point helpers."""

import argparse

import pytest

from geocache.__main__ import _build_parser, _parse_steps, _run_walk
from geocache.systems.persistence import JsonFileSlotStorage, PersistenceGateway


class TestParseSteps:

    def test_expand(self):
        assert _parse_steps(["2n", "e", "3S"]) == ["NORTH", "NORTH", "EAST", "SOUTH", "SOUTH", "SOUTH"]

    @pytest.mark.parametrize("token", ["x", "2x", "an", ""])
    def test_reject(self, token):
        with pytest.raises(argparse.ArgumentTypeError):
            _parse_steps([token])


class TestWalk:

    def test_walk_saves_collected_coins(self, tmp_path):
        save_dir = tmp_path / "save"
        args = _build_parser().parse_args(
            ["walk", "3n", "2e", "--save-dir", str(save_dir), "--radius", "3", "--fresh", "--log-level", "WARNING"]
        )
        _run_walk(args)
        cache_map, wallet = PersistenceGateway(JsonFileSlotStorage(save_dir)).load()
        assert cache_map is not None
        assert wallet is not None
        assert len(wallet) == len(set(wallet))
