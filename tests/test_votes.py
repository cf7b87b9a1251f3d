"""Tests for the dominant-emotion vote."""

import random

import pytest

from capture_booth.types import Emotion
from capture_booth.votes import VoteAggregator


def _votes(counts):
    agg = VoteAggregator()
    labels = [label for label, n in counts.items() for _ in range(n)]
    random.Random(7).shuffle(labels)
    for label in labels:
        agg.add(label)
    return agg


def test_majority_wins():
    agg = _votes({Emotion.HAPPY: 6, Emotion.NEUTRAL: 3, Emotion.ANGRY: 1})
    assert agg.dominant() == Emotion.HAPPY


@pytest.mark.parametrize(
    "counts, expected",
    [
        ({Emotion.NEUTRAL: 4, Emotion.HAPPY: 4}, Emotion.HAPPY),
        ({Emotion.ANGRY: 2, Emotion.SURPRISED: 2}, Emotion.SURPRISED),
        ({Emotion.NEUTRAL: 5, Emotion.ANGRY: 5, Emotion.HAPPY: 1}, Emotion.ANGRY),
    ],
)
def test_ties_follow_declaration_order(counts, expected):
    assert _votes(counts).dominant() == expected


def test_empty_window_resolves_to_first_label():
    assert VoteAggregator().dominant() == Emotion.HAPPY


def test_reset_clears_every_bucket():
    agg = _votes({Emotion.HAPPY: 3, Emotion.ANGRY: 2})
    agg.reset()
    assert agg.total == 0
    assert agg.snapshot() == {"happy": 0, "surprised": 0, "angry": 0, "neutral": 0}
