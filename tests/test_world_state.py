"""Tests for WorldState: token transfer and the exclusivity invariant."""

import pytest

from geocache.core.cache import Cache, CacheMemento
from geocache.core.errors import InvariantViolation, TokenNotFound, TokenNotHeld, UnknownCache
from geocache.core.models import Cell
from geocache.core.world_state import WALLET, WorldState


def _world() -> tuple[WorldState, Cell, Cell]:
    world = WorldState()
    a, b = Cell(0, 0), Cell(1, 1)
    world.put(a, Cache(a, ["coin-0:0#0", "coin-0:0#1", "coin-0:0#2"]))
    world.put(b, Cache(b, ["coin-1:1#0"]))
    return world, a, b


class TestCollect:

    def test_moves_token_to_wallet(self):
        world, a, _ = _world()
        world.collect(a, "coin-0:0#1")
        assert world.wallet == ("coin-0:0#1",)
        assert world.get(a).tokens == ("coin-0:0#0", "coin-0:0#2")

    def test_missing_token(self):
        world, a, _ = _world()
        with pytest.raises(TokenNotFound):
            world.collect(a, "coin-9:9#9")
        assert world.wallet == ()
        assert len(world.get(a)) == 3

    def test_double_collect_is_rejected(self):
        world, a, _ = _world()
        world.collect(a, "coin-0:0#0")
        with pytest.raises(TokenNotFound):
            world.collect(a, "coin-0:0#0")
        assert world.wallet == ("coin-0:0#0",)

    def test_missing_cache(self):
        world, _, _ = _world()
        with pytest.raises(TokenNotFound):
            world.collect(Cell(5, 5), "coin-0:0#0")


class TestDeposit:

    def test_moves_token_to_end_of_cache(self):
        world, a, b = _world()
        world.collect(a, "coin-0:0#0")
        world.deposit("coin-0:0#0", b)
        assert world.wallet == ()
        assert world.get(b).tokens == ("coin-1:1#0", "coin-0:0#0")

    def test_token_not_held(self):
        world, a, b = _world()
        with pytest.raises(TokenNotHeld):
            world.deposit("coin-0:0#0", b)
        assert world.get(b).tokens == ("coin-1:1#0",)

    def test_unknown_cache_keeps_wallet(self):
        world, a, _ = _world()
        world.collect(a, "coin-0:0#0")
        with pytest.raises(UnknownCache):
            world.deposit("coin-0:0#0", Cell(7, 7))
        assert world.wallet == ("coin-0:0#0",)

    def test_collect_deposit_roundtrip(self):
        world, a, _ = _world()
        world.collect(a, "coin-0:0#1")
        world.deposit("coin-0:0#1", a)
        assert "coin-0:0#1" in world.get(a)
        assert sorted(world.get(a).tokens) == ["coin-0:0#0", "coin-0:0#1", "coin-0:0#2"]
        assert not world.holds("coin-0:0#1")


class TestExclusivity:

    def test_shuffle_keeps_every_token_in_one_place(self):
        world, a, b = _world()
        before = sorted(t for _, c in world.caches() for t in c.tokens)
        moves = [
            ("collect", a, "coin-0:0#0"),
            ("collect", b, "coin-1:1#0"),
            ("deposit", b, "coin-0:0#0"),
            ("collect", a, "coin-0:0#2"),
            ("deposit", a, "coin-1:1#0"),
            ("collect", b, "coin-0:0#0"),
        ]
        for verb, cell, tid in moves:
            if verb == "collect":
                world.collect(cell, tid)
            else:
                world.deposit(tid, cell)
            world.check_exclusivity()
        after = sorted(list(world.wallet) + [t for _, c in world.caches() for t in c.tokens])
        assert after == before

    def test_owner_of(self):
        world, a, b = _world()
        world.collect(a, "coin-0:0#0")
        assert world.owner_of("coin-0:0#0") == WALLET
        assert world.owner_of("coin-1:1#0") is b
        assert world.owner_of("nope") is None

    def test_violation_detected(self):
        world, a, b = _world()
        world.get(b).add_token("coin-0:0#0")  # bypasses WorldState on purpose
        with pytest.raises(InvariantViolation):
            world.check_exclusivity()


class TestRestore:

    def test_restore_merges_by_default(self):
        world, a, b = _world()
        c = Cell(2, 2)
        skipped = world.restore({c: CacheMemento('["x"]')}, None)
        assert skipped == []
        assert set(cell for cell, _ in world.caches()) == {a, b, c}

    def test_restore_replace_drops_unsaved(self):
        world, a, b = _world()
        world.collect(a, "coin-0:0#0")
        world.restore({a: CacheMemento('["coin-0:0#0"]')}, None, replace=True)
        assert [cell for cell, _ in world.caches()] == [a]
        assert world.wallet == ()
        assert world.get(a).tokens == ("coin-0:0#0",)

    def test_corrupt_entry_keeps_memory(self):
        world, a, b = _world()
        skipped = world.restore({a: CacheMemento("{broken"), b: CacheMemento("[]")}, ["w"])
        assert skipped == [a]
        assert len(world.get(a)) == 3
        assert len(world.get(b)) == 0
        assert world.wallet == ("w",)

    def test_corrupt_entry_without_cache_stays_materialized(self):
        world = WorldState()
        c = Cell(3, 3)
        skipped = world.restore({c: CacheMemento("garbage")}, ["coin-3:3#0"], replace=True)
        assert skipped == [c]
        assert c in world
        assert world.get(c).tokens == ()
        world.check_exclusivity()

    def test_release_duplicates_from_stale_cache(self):
        world, a, b = _world()
        world.restore({a: CacheMemento("{broken"), b: CacheMemento('["coin-1:1#0"]')},
                      ["coin-0:0#1"], replace=True)
        dropped = world.release_duplicates([a])
        assert dropped == ["coin-0:0#1"]
        assert world.get(a).tokens == ("coin-0:0#0", "coin-0:0#2")
        world.check_exclusivity()

    def test_claimed_tokens(self):
        world, a, _ = _world()
        world.collect(a, "coin-0:0#2")
        assert world.claimed_tokens() == {"coin-0:0#0", "coin-0:0#1", "coin-0:0#2", "coin-1:1#0"}

    def test_reset(self):
        world, a, _ = _world()
        world.collect(a, "coin-0:0#0")
        world.reset()
        assert len(world) == 0
        assert world.wallet == ()
