"""
Capture Booth – Gesture Estimator
Decides whether any detected hand is showing the trigger gesture (a
thumbs-up) this frame.  No ML model needed – pure geometry.

Policies
--------
StrictThumbsUp – confident hand, thumb within a cone of straight up,
                 other four fingers curled, palm roughly upright.
LooseThumbsUp  – thumb tip simply sits above the index and middle tips.

Only one policy is active per deployment; the thresholds are the knobs,
the shape of the test is fixed.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from . import config as cfg
from .types import HandDetection, HandLandmark as H


@dataclass(frozen=True)
class StrictThumbsUp:
    min_confidence: float = cfg.STRICT_MIN_CONFIDENCE
    max_thumb_angle: float = cfg.STRICT_MAX_THUMB_ANGLE
    curl_margin: float = cfg.STRICT_CURL_MARGIN
    palm_margin: float = cfg.STRICT_PALM_MARGIN


@dataclass(frozen=True)
class LooseThumbsUp:
    tip_margin: float = cfg.LOOSE_TIP_MARGIN


GesturePolicy = Union[StrictThumbsUp, LooseThumbsUp]

# (tip, pip) pairs for the four non-thumb fingers
_CURL_PAIRS = (
    (H.INDEX_TIP, H.INDEX_PIP),
    (H.MIDDLE_TIP, H.MIDDLE_PIP),
    (H.RING_TIP, H.RING_PIP),
    (H.PINKY_TIP, H.PINKY_PIP),
)


class GestureEstimator:
    """Evaluates the configured policy against every hand in a frame."""

    def __init__(self, policy: Optional[GesturePolicy] = None) -> None:
        self.policy = policy or StrictThumbsUp()

    def estimate(self, hands: Sequence[HandDetection]) -> bool:
        """True if at least one hand qualifies."""
        return any(self.qualifies(hand) for hand in hands)

    def qualifies(self, hand: HandDetection) -> bool:
        if isinstance(self.policy, StrictThumbsUp):
            return strict_thumbs_up(hand, self.policy)
        return loose_thumbs_up(hand, self.policy)


# ── strict ───────────────────────────────────────────────────────────
def strict_thumbs_up(hand: HandDetection, p: StrictThumbsUp) -> bool:
    """Orientation + curled fingers + upright palm, on a confident hand."""
    if hand.confidence < p.min_confidence:
        return False

    # 1) Thumb pointing upwards
    mcp = hand.keypoint(H.THUMB_MCP)
    tip = hand.keypoint(H.THUMB_TIP)
    if mcp is None or tip is None:
        return False
    if angle_to_up(tip.x - mcp.x, tip.y - mcp.y) >= p.max_thumb_angle:
        return False

    # 2) Other fingers curled
    if not all(tip_below_pip(hand, t, j, p.curl_margin) for t, j in _CURL_PAIRS):
        return False

    # 3) Palm roughly upright – filters sideways hands
    wrist = hand.wrist
    index_mcp = hand.keypoint(H.INDEX_MCP)
    if wrist is None or index_mcp is None:
        return False
    return wrist.y > index_mcp.y - p.palm_margin


def angle_to_up(vx: float, vy: float) -> float:
    """Degrees between ``(vx, vy)`` and screen-up ``(0, -1)``.  0 = straight up."""
    mag = math.hypot(vx, vy) or 1e-6
    cos = max(-1.0, min(1.0, -vy / mag))
    return math.degrees(math.acos(cos))


def tip_below_pip(hand: HandDetection, tip_idx: int, pip_idx: int, margin: float) -> bool:
    """Curled finger: the tip hangs below its PIP joint by more than *margin*."""
    tip = hand.keypoint(tip_idx)
    pip = hand.keypoint(pip_idx)
    if tip is None or pip is None:
        return False
    return tip.y > pip.y + margin


# ── loose ────────────────────────────────────────────────────────────
def loose_thumbs_up(hand: HandDetection, p: LooseThumbsUp) -> bool:
    t, i, m = hand.thumb_tip, hand.index_tip, hand.middle_tip
    if t is None or i is None or m is None:
        return False
    return t.y < i.y - p.tip_margin and t.y < m.y - p.tip_margin
