"""
Capture Booth – Vote Aggregator
Counts the per-frame emotion label during the countdown and resolves a
single dominant emotion when it closes.
"""

from __future__ import annotations

from typing import Dict

from .types import Emotion


class VoteAggregator:
    """One bucket per label, kept in ``Emotion`` declaration order."""

    def __init__(self) -> None:
        self.buckets: Dict[Emotion, int] = {e: 0 for e in Emotion}

    def reset(self) -> None:
        for e in self.buckets:
            self.buckets[e] = 0

    def add(self, label: Emotion) -> None:
        self.buckets[label] += 1

    @property
    def total(self) -> int:
        return sum(self.buckets.values())

    def dominant(self) -> Emotion:
        """
        Label with the highest count.  ``max`` keeps the first of equal
        keys, so ties go to the earlier label (happy, surprised, angry,
        neutral).  An empty window is a four-way tie and reads as happy.
        """
        return max(self.buckets, key=self.buckets.__getitem__)

    def snapshot(self) -> Dict[str, int]:
        return {e.value: n for e, n in self.buckets.items()}
