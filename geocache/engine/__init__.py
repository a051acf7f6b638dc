"""Engine layer: session controller, position feed, wiring."""

from geocache.engine.builder import build_session
from geocache.engine.position_feed import FeedSubscription, PositionFeed
from geocache.engine.session import SessionController, SessionStatus

__all__ = ["FeedSubscription", "PositionFeed", "SessionController", "SessionStatus", "build_session"]
