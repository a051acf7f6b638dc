"""Cache entity and its memento."""

from __future__ import annotations

import json
from dataclasses import dataclass

from geocache.core.errors import CorruptSnapshot
from geocache.core.models import Cell


@dataclass(frozen=True, slots=True)
class CacheMemento:
    """Opaque, order-preserving encoding of a cache's token list.

    ``payload`` is a compact JSON array; treat it as opaque outside this
    module and the persistence layer.
    """

    payload: str

    def decode(self) -> list[str]:
        """Return the encoded token list or raise ``CorruptSnapshot``."""
        try:
            tokens = json.loads(self.payload)
        except (TypeError, ValueError) as exc:
            raise CorruptSnapshot(f"unparseable cache snapshot: {exc}") from exc
        if not isinstance(tokens, list) or not all(isinstance(t, str) for t in tokens):
            raise CorruptSnapshot("cache snapshot is not a list of token ids")
        return tokens

    @classmethod
    def encode(cls, tokens: list[str] | tuple[str, ...]) -> CacheMemento:
        return cls(json.dumps(list(tokens), separators=(",", ":")))


class Cache:
    """A cell's cache of tokens.

    The token list is mutable but only ``WorldState`` should move tokens in
    and out, so that a token is never owned by two containers.
    """

    __slots__ = ("cell", "_tokens")

    def __init__(self, cell: Cell, tokens: list[str] | None = None) -> None:
        self.cell = cell
        self._tokens: list[str] = list(tokens) if tokens else []

    @classmethod
    def from_memento(cls, cell: Cell, memento: CacheMemento) -> Cache:
        return cls(cell, memento.decode())

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, token_id: object) -> bool:
        return token_id in self._tokens

    # -- memento --

    def snapshot(self) -> CacheMemento:
        return CacheMemento.encode(self._tokens)

    def restore(self, memento: CacheMemento) -> None:
        """Replace the token list with *memento*'s contents (all-or-nothing)."""
        self._tokens = memento.decode()

    # -- mutation --

    def remove_token(self, token_id: str) -> bool:
        """Remove the first occurrence of *token_id*; False if it was absent."""
        try:
            self._tokens.remove(token_id)
        except ValueError:
            return False
        return True

    def add_token(self, token_id: str) -> None:
        self._tokens.append(token_id)

    def __repr__(self) -> str:
        return f"Cache({self.cell.key}, tokens={len(self._tokens)})"
