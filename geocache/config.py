"""Game configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass

from geocache.core.errors import ConfigurationError


@dataclass(frozen=True)
class GameConfig:
    """Immutable configuration for a game session."""

    # Start location (Oakes College classroom)
    origin_lat: float = 36.98949379578401
    origin_lng: float = -122.06277128548504

    # Grid
    tile_width: float = 1e-4          # degrees per cell edge
    visibility_radius: int = 8        # Chebyshev radius, in cells

    # Spawning
    spawn_probability: float = 0.1
    max_tokens: int = 5

    # Interaction
    interaction_radius: float = 10.0  # cell units

    # Persistence
    save_dir: str = "save"
    autosave: bool = True

    # Logging
    log_level: str = "INFO"
    event_log_size: int = 500

    def validate(self) -> GameConfig:
        """Raise ``ConfigurationError`` for values the engine cannot run with."""
        if self.tile_width <= 0:
            raise ConfigurationError("tile_width", "must be positive")
        if self.visibility_radius < 0:
            raise ConfigurationError("visibility_radius", "must be >= 0")
        if not 0.0 <= self.spawn_probability <= 1.0:
            raise ConfigurationError("spawn_probability", "must be within [0, 1]")
        if self.max_tokens < 1:
            raise ConfigurationError("max_tokens", "must be >= 1")
        if self.interaction_radius < 0:
            raise ConfigurationError("interaction_radius", "must be >= 0")
        return self
