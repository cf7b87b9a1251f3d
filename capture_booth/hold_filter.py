"""
Capture Booth – Hold Filter & Cooldown Gate
Turns a noisy per-frame boolean into a single edge-triggered event.

The counter rises by one per positive frame and falls by ``decay_step``
per negative frame, so a one-frame dropout costs a few frames rather
than the whole hold.  After firing, the cooldown gate blocks the filter
(and pauses its counter) for a fixed number of frames.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from . import config as cfg

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HoldParams:
    threshold: int = cfg.HOLD_THRESHOLD
    decay_step: int = cfg.HOLD_DECAY_STEP
    cooldown_frames: int = cfg.COOLDOWN_FRAMES


class CooldownGate:
    """Refractory period counted in frames."""

    def __init__(self) -> None:
        self.remaining: int = 0

    @property
    def active(self) -> bool:
        return self.remaining > 0

    def tick(self) -> None:
        if self.remaining > 0:
            self.remaining -= 1

    def start(self, frames: int) -> None:
        self.remaining = max(0, frames)


class HoldFilter:
    """
    ``update(raw)`` returns True exactly on the frame the hold completes.

    Call it at most once per frame.  Frames where the filter is not
    consulted should still call ``gate.tick()`` so the cooldown keeps
    counting down.
    """

    def __init__(self, params: Optional[HoldParams] = None) -> None:
        self.params = params or HoldParams()
        self.counter: int = 0
        self.gate = CooldownGate()

    def update(self, raw: bool) -> bool:
        if self.gate.active:
            self.gate.tick()
            return False

        if raw:
            self.counter += 1
        else:
            self.counter = max(0, self.counter - self.params.decay_step)

        if self.counter >= self.params.threshold:
            logger.debug("hold filter fired after %d frames", self.counter)
            self.counter = 0
            self.gate.start(self.params.cooldown_frames)
            return True
        return False

    def reset(self) -> None:
        """Drop accumulated hold without touching the cooldown."""
        self.counter = 0
