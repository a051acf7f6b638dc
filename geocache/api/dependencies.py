"""FastAPI dependency injection: provides the SessionController singleton."""

from __future__ import annotations

from geocache.engine.session import SessionController

_session: SessionController | None = None


def set_session(session: SessionController | None) -> None:
    global _session
    _session = session


def get_session() -> SessionController:
    if _session is None:
        raise RuntimeError("Session not initialized; server not started correctly.")
    return _session
