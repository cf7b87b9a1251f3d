"""
Capture Booth – Shared types
Plain data passed between the keypoint source, the estimators and the
state machine.  Coordinates are image pixels, y grows downward.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional


class Emotion(str, Enum):
    """Emotion labels in vote tie-break order."""

    HAPPY = "happy"
    SURPRISED = "surprised"
    ANGRY = "angry"
    NEUTRAL = "neutral"


class Phase(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    GENERATING = "generating"
    DONE = "done"


class HandLandmark(IntEnum):
    """MediaPipe 21-point hand layout."""

    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


class MeshLandmark(IntEnum):
    """The few MediaPipe face-mesh indices the smile path reads."""

    MOUTH_LEFT = 61
    MOUTH_RIGHT = 291
    UPPER_LIP = 13
    LOWER_LIP = 14
    LEFT_EYE_OUTER = 33
    RIGHT_EYE_OUTER = 263


@dataclass(slots=True, frozen=True)
class Point:
    x: float
    y: float


@dataclass(slots=True, frozen=True)
class FaceBox:
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(slots=True)
class HandDetection:
    """One detected hand: 21 keypoints plus the detector's score."""
    keypoints: List[Point]
    confidence: float = 1.0

    def keypoint(self, idx: int) -> Optional[Point]:
        """Keypoint by index, or ``None`` when the detector returned fewer."""
        if 0 <= idx < len(self.keypoints):
            return self.keypoints[idx]
        return None

    @property
    def wrist(self) -> Optional[Point]:
        return self.keypoint(HandLandmark.WRIST)

    @property
    def thumb_tip(self) -> Optional[Point]:
        return self.keypoint(HandLandmark.THUMB_TIP)

    @property
    def index_tip(self) -> Optional[Point]:
        return self.keypoint(HandLandmark.INDEX_TIP)

    @property
    def middle_tip(self) -> Optional[Point]:
        return self.keypoint(HandLandmark.MIDDLE_TIP)


@dataclass(slots=True)
class DetectionFrame:
    """Everything the keypoint source saw in one camera frame."""
    face: Optional[FaceBox] = None
    hands: List[HandDetection] = field(default_factory=list)
    mesh: Optional[List[Point]] = None


EMOTION_THEMES = {
    Emotion.HAPPY: "Experience & Growth (viral UX, community loops)",
    Emotion.SURPRISED: "Frontier & Novelty (new interfaces, emerging tech)",
    Emotion.ANGRY: "Ops & Efficiency (speed, reliability, automation)",
    Emotion.NEUTRAL: "Clarity & Trust (data, compliance, governance)",
}
