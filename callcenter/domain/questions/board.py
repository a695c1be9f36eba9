"""
Board geometry for a topic's children.

Positions are ``{"x", "y", "width", "height"}`` in board units (zoom 1).
"""

import random
from dataclasses import dataclass
from typing import Optional

DEFAULT_CARD_WIDTH = 320
DEFAULT_CARD_HEIGHT = 240
# New cards are scattered over this area
SPAWN_WIDTH = 800
SPAWN_HEIGHT = 600

MIN_CARD_WIDTH = 250
MIN_CARD_HEIGHT = 200

FIT_PADDING = 100
MAX_FIT_ZOOM = 1.0
MIN_FIT_ZOOM = 0.1


@dataclass
class Viewport:
    zoom: float
    pan_x: float
    pan_y: float


def default_position(rng: Optional[random.Random] = None) -> dict:
    rng = rng or random
    return {
        "x": rng.random() * SPAWN_WIDTH,
        "y": rng.random() * SPAWN_HEIGHT,
        "width": DEFAULT_CARD_WIDTH,
        "height": DEFAULT_CARD_HEIGHT,
    }


def clamp_position(x: float, y: float, width: float, height: float) -> dict:
    """Cards stay in the positive quadrant and never shrink below the minimum size"""
    return {
        "x": max(0.0, x),
        "y": max(0.0, y),
        "width": max(float(MIN_CARD_WIDTH), width),
        "height": max(float(MIN_CARD_HEIGHT), height),
    }


def fit_to_screen(
    positions: list[dict], viewport_width: float, viewport_height: float
) -> Optional[Viewport]:
    """
    Zoom and pan that frame every card inside the viewport.

    Zoom stays within [MIN_FIT_ZOOM, 1], so viewports smaller than the padding
    still get a usable view. Returns None for an empty board.
    """
    if not positions:
        return None

    min_x = min(p["x"] for p in positions)
    min_y = min(p["y"] for p in positions)
    max_x = max(p["x"] + p["width"] for p in positions)
    max_y = max(p["y"] + p["height"] for p in positions)

    content_width = max_x - min_x
    content_height = max_y - min_y

    scale_x = (viewport_width - FIT_PADDING) / content_width
    scale_y = (viewport_height - FIT_PADDING) / content_height
    zoom = max(MIN_FIT_ZOOM, min(scale_x, scale_y, MAX_FIT_ZOOM))

    return Viewport(
        zoom=zoom,
        pan_x=(viewport_width - content_width * zoom) / 2 - min_x * zoom,
        pan_y=(viewport_height - content_height * zoom) / 2 - min_y * zoom,
    )
