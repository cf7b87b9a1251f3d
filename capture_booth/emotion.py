"""
Capture Booth – Emotion Estimator
Turns a face box (and, when available, face-mesh landmarks) into one of
four emotion labels.  Pure geometry, no model.

Two paths
---------
mesh smile   – mouth width / height normalised by inter-eye distance,
               EMA-smoothed and compared against a slow neutral baseline.
box fallback – face-box aspect ratio (angry) and frame-to-frame area
               jumps (surprised).  Never overrides a mesh "happy".

The label is raw per frame; hysteresis belongs to the hold filter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from . import config as cfg
from .types import Emotion, FaceBox, MeshLandmark, Point


@dataclass
class SmoothingState:
    """Session-long EMAs for the smile path.  ``None`` until first sample."""
    eye_dist: Optional[float] = None
    mouth_width: Optional[float] = None
    mouth_height: Optional[float] = None
    baseline_width: Optional[float] = None


@dataclass(frozen=True)
class EmotionParams:
    eye_dist_alpha: float = cfg.EYE_DIST_ALPHA
    mouth_alpha: float = cfg.MOUTH_ALPHA
    baseline_alpha: float = cfg.BASELINE_ALPHA
    baseline_clamp: float = cfg.BASELINE_CLAMP
    open_mouth_ratio: float = cfg.OPEN_MOUTH_RATIO
    open_mouth_penalty: float = cfg.OPEN_MOUTH_PENALTY
    smile_margin: float = cfg.SMILE_MARGIN
    angry_ratio: float = cfg.ANGRY_RATIO
    box_happy_ratio: float = cfg.BOX_HAPPY_RATIO
    surprise_area_change: float = cfg.SURPRISE_AREA_CHANGE


def ema(prev: Optional[float], sample: float, alpha: float) -> float:
    """``prev + alpha * (sample - prev)``; the first sample seeds the average."""
    if prev is None:
        return sample
    return prev + alpha * (sample - prev)


def smile_score(
    width_ratio: float,
    height_ratio: float,
    baseline: float,
    params: EmotionParams = EmotionParams(),
) -> float:
    """
    Smile strength: how much wider than neutral the mouth currently is.

    A wide-open mouth (surprise, shouting) also stretches the corners, so
    the score is attenuated once the height ratio passes the open-mouth
    threshold.
    """
    score = width_ratio - baseline
    if height_ratio > params.open_mouth_ratio:
        score *= params.open_mouth_penalty
    return score


class EmotionEstimator:
    """
    Stateless apart from the ``SmoothingState`` it is handed each frame,
    so the caller decides when smoothing is reset.
    """

    def __init__(self, params: Optional[EmotionParams] = None) -> None:
        self.params = params or EmotionParams()

    # ── public ───────────────────────────────────────────────────────
    def estimate(
        self,
        face: Optional[FaceBox],
        mesh: Optional[Sequence[Point]],
        previous_area: float,
        smoothing: SmoothingState,
    ) -> Tuple[Emotion, float]:
        """
        Return ``(label, new_area)``.

        ``previous_area`` is the face-box area from the last frame that had
        a face; it is passed back unchanged when there is no face.
        """
        if face is None:
            return Emotion.NEUTRAL, previous_area

        area = face.area
        if mesh:
            if self.mesh_smile(mesh, smoothing) >= self.params.smile_margin:
                return Emotion.HAPPY, area
            label = self.box_label(face, previous_area, allow_happy=False)
        else:
            label = self.box_label(face, previous_area, allow_happy=True)
        return label, area

    def mesh_smile(self, mesh: Sequence[Point], smoothing: SmoothingState) -> float:
        """Update the smoothing state from one mesh and return the smile score."""
        p = self.params
        raw = _mouth_geometry(mesh)
        if raw is None:
            return 0.0
        eye_dist, mouth_w, mouth_h = raw
        if eye_dist <= 1e-6:
            return 0.0

        smoothing.eye_dist = ema(smoothing.eye_dist, eye_dist, p.eye_dist_alpha)

        width_ratio = mouth_w / smoothing.eye_dist
        height_ratio = mouth_h / smoothing.eye_dist
        smoothing.mouth_width = ema(smoothing.mouth_width, width_ratio, p.mouth_alpha)
        smoothing.mouth_height = ema(smoothing.mouth_height, height_ratio, p.mouth_alpha)

        # Score against the baseline as it stood before this frame.
        baseline = smoothing.baseline_width
        if baseline is None:
            baseline = min(smoothing.mouth_width, p.baseline_clamp)
        score = smile_score(smoothing.mouth_width, smoothing.mouth_height, baseline, p)

        smoothing.baseline_width = ema(
            smoothing.baseline_width,
            min(smoothing.mouth_width, p.baseline_clamp),
            p.baseline_alpha,
        )
        return score

    def box_label(self, face: FaceBox, previous_area: float, allow_happy: bool) -> Emotion:
        """Face-box heuristics; ``surprised`` is checked last and wins."""
        p = self.params
        label = Emotion.NEUTRAL
        if face.width > 0:
            ratio = face.height / face.width
            if allow_happy and ratio > p.box_happy_ratio:
                label = Emotion.HAPPY
            elif ratio < p.angry_ratio:
                label = Emotion.ANGRY

        change = abs(face.area - previous_area) / previous_area if previous_area else 0.0
        if change > p.surprise_area_change:
            label = Emotion.SURPRISED
        return label


# ── helpers ──────────────────────────────────────────────────────────
def _mouth_geometry(mesh: Sequence[Point]) -> Optional[Tuple[float, float, float]]:
    """Raw (eye distance, mouth width, mouth height) or ``None`` if indices are missing."""
    if max(MeshLandmark) >= len(mesh):
        return None
    eye_dist = _dist(mesh[MeshLandmark.LEFT_EYE_OUTER], mesh[MeshLandmark.RIGHT_EYE_OUTER])
    mouth_w = _dist(mesh[MeshLandmark.MOUTH_LEFT], mesh[MeshLandmark.MOUTH_RIGHT])
    mouth_h = _dist(mesh[MeshLandmark.UPPER_LIP], mesh[MeshLandmark.LOWER_LIP])
    return eye_dist, mouth_w, mouth_h


def _dist(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)
