"""Entry point: ``python -m geocache``.

Supports two modes:
  - ``python -m geocache``            → Launch FastAPI server
  - ``python -m geocache walk N E``   → Headless walk: step, collect, save
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)

_STEP_CODES = {"n": "NORTH", "e": "EAST", "s": "SOUTH", "w": "WEST"}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Geocache World Engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--save-dir", type=str, default="save")
    srv.add_argument("--radius", type=int, default=8)
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless walk ---
    walk = sub.add_parser("walk", help="Walk a route of manual steps and collect coins in reach")
    walk.add_argument("steps", nargs="*", default=[], help="Steps like n, e, 3s, 2w")
    walk.add_argument("--save-dir", type=str, default="save")
    walk.add_argument("--radius", type=int, default=8)
    walk.add_argument("--fresh", action="store_true", help="Ignore and overwrite any saved game")
    walk.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _parse_steps(tokens: list[str]) -> list[str]:
    """Expand ``["2n", "e"]`` into ``["NORTH", "NORTH", "EAST"]``."""
    expanded: list[str] = []
    for token in tokens:
        count, code = token[:-1], token[-1:].lower()
        if code not in _STEP_CODES or (count and not count.isdigit()):
            raise argparse.ArgumentTypeError(f"bad step {token!r}; use n/e/s/w with optional count")
        expanded.extend([_STEP_CODES[code]] * (int(count) if count else 1))
    return expanded


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from geocache.api.app import create_app
    from geocache.config import GameConfig

    config = GameConfig(
        save_dir=args.save_dir,
        visibility_radius=args.radius,
        log_level=args.log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_walk(args: argparse.Namespace) -> None:
    from geocache.config import GameConfig
    from geocache.core.enums import Direction
    from geocache.engine.builder import build_session
    from geocache.utils.logging import setup_logging

    config = GameConfig(
        save_dir=args.save_dir,
        visibility_radius=args.radius,
        log_level=args.log_level,
        autosave=False,
    )
    setup_logging(config.log_level)

    steps = _parse_steps(args.steps)
    session = build_session(config, start=False)
    session.start(load=not args.fresh)

    collected = 0
    for name in steps:
        session.step(Direction[name])
        for cell, cache in session.visible_caches():
            if cell.distance(session.cell) > config.interaction_radius:
                continue
            for token in cache.tokens:
                session.collect(cell, token)
                collected += 1

    session.save()
    status = session.status()
    logger.info(
        "Walked %d steps to cell %s: collected %d coins, holding %d, %d caches known",
        len(steps), status.cell.key, collected, status.wallet_size, status.cache_count,
    )


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "walk":
        try:
            _run_walk(args)
        except argparse.ArgumentTypeError as exc:
            parser.error(str(exc))


if __name__ == "__main__":
    main()
