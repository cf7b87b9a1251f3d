"""
Capture Booth – Trigger Policies
What arms the booth.  Either a held hand gesture or a smile; both go
through the same hold filter, only the raw per-frame signal differs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Union

from . import config as cfg
from .gesture import GesturePolicy, LooseThumbsUp, StrictThumbsUp
from .hold_filter import HoldParams


@dataclass(frozen=True)
class GestureTrigger:
    gesture: GesturePolicy = field(default_factory=StrictThumbsUp)
    hold: HoldParams = field(default_factory=HoldParams)


@dataclass(frozen=True)
class SmileTrigger:
    hold: HoldParams = field(
        default_factory=lambda: HoldParams(threshold=cfg.SMILE_HOLD_THRESHOLD)
    )


TriggerPolicy = Union[GestureTrigger, SmileTrigger]

PRESETS: Dict[str, TriggerPolicy] = {
    "strict": GestureTrigger(),
    "loose": GestureTrigger(
        gesture=LooseThumbsUp(),
        hold=HoldParams(threshold=cfg.LOOSE_HOLD_THRESHOLD),
    ),
    "smile": SmileTrigger(),
}
