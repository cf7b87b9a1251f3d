"""
Capture Booth – HUD
Everything the preview window shows: the title line, status panel,
countdown, the share link (as text and as a scannable QR panel) and
the error notice.  Reads a ``FrameResult`` and never feeds anything back.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

import cv2
import numpy as np

from .state_machine import FrameResult
from .types import DetectionFrame, Phase

# ── colour palette (BGR) per effect ─────────────────────────────────
EFFECT_COLOURS = {
    "aura": (0, 215, 255),
    "flames": (0, 51, 255),
    "shockwave": (255, 221, 136),
    "beam": (136, 255, 0),
    "heart": (204, 102, 255),
    "standby": (255, 255, 0),
}

_EFFECT_TITLES = {
    "aura": "HAPPY HERO",
    "flames": "RAGE MODE",
    "shockwave": "SHOCKWAVE",
    "beam": "Ready for your photo?",
}

PROMPT = "Give us a thumbs-up and we'll take your photo"

QR_PANEL_SIZE = 240
QR_CAPTION = "Scan to get your photo"


def title_for(result: FrameResult) -> str:
    if result.phase == Phase.ARMED:
        return f"Capturing... {result.countdown}s"
    if result.phase == Phase.GENERATING:
        return "Generating..."
    if result.phase == Phase.DONE:
        return "Your photo is ready"
    return _EFFECT_TITLES.get(result.effect, "Step up for an Innovation Centre photo")


def draw_hud(
    frame: np.ndarray,
    result: FrameResult,
    detections: Optional[DetectionFrame] = None,
) -> None:
    """Draw the overlay in place."""
    colour = EFFECT_COLOURS.get(result.effect, (200, 200, 200))
    h, w = frame.shape[:2]

    if detections is not None and detections.face is not None:
        f = detections.face
        cv2.rectangle(
            frame,
            (int(f.x), int(f.y)),
            (int(f.x + f.width), int(f.y + f.height)),
            colour,
            2,
        )
    if detections is not None:
        for hand in detections.hands:
            for p in hand.keypoints:
                cv2.circle(frame, (int(p.x), int(p.y)), 3, colour, -1)

    # Title bar
    cv2.rectangle(frame, (0, 0), (w, 60), (30, 30, 30), -1)
    cv2.putText(frame, title_for(result), (16, 42),
                cv2.FONT_HERSHEY_SIMPLEX, 1.1, colour, 2)

    # Status panel
    lines = [f"{k.capitalize()}: {v}" for k, v in result.hud.items() if k != "countdown"]
    cv2.rectangle(frame, (0, 70), (230, 70 + 28 * len(lines) + 10), (30, 30, 30), -1)
    for i, line in enumerate(lines):
        cv2.putText(frame, line, (10, 96 + 28 * i),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7, (230, 230, 230), 2)

    if result.phase == Phase.ARMED:
        cv2.putText(frame, str(result.countdown), (w // 2 - 40, h // 2 + 40),
                    cv2.FONT_HERSHEY_SIMPLEX, 4.0, colour, 8)
    elif result.phase == Phase.IDLE and not result.share_url and not result.notice:
        cv2.putText(frame, PROMPT, (16, h - 24),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.9, (255, 255, 255), 2)

    footer = result.notice or (f"Open: {result.share_url}" if result.share_url else "")
    if footer:
        cv2.rectangle(frame, (0, h - 56), (w, h), (30, 30, 30), -1)
        cv2.putText(frame, footer[:110], (16, h - 20),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6,
                    (80, 80, 255) if result.notice else (255, 255, 255), 2)

    if result.share_url:
        draw_share_qr(frame, result.share_url)


@lru_cache(maxsize=8)
def qr_image(text: str, size: int) -> np.ndarray:
    """BGR QR code for *text*, scaled to at most *size* pixels square."""
    code = cv2.QRCodeEncoder.create().encode(text)
    code = cv2.copyMakeBorder(code, 4, 4, 4, 4, cv2.BORDER_CONSTANT, value=255)
    scale = max(1, size // code.shape[0])
    code = cv2.resize(code, None, fx=scale, fy=scale,
                      interpolation=cv2.INTER_NEAREST)
    return cv2.cvtColor(code, cv2.COLOR_GRAY2BGR)


def draw_share_qr(frame: np.ndarray, url: str) -> None:
    """Bottom-right QR panel for the share link, kept clear of the footer."""
    h, w = frame.shape[:2]
    size = min(QR_PANEL_SIZE, h - 160, w // 3)
    if size < 60:
        return
    code = qr_image(url, size)
    side = code.shape[0]
    if side > size:
        return
    x0, y1 = w - side - 16, h - 70
    y0 = y1 - side
    cv2.rectangle(frame, (x0 - 6, y0 - 34), (x0 + side + 6, y1 + 6), (30, 30, 30), -1)
    cv2.putText(frame, QR_CAPTION, (x0, y0 - 12),
                cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
    frame[y0:y1, x0:x0 + side] = code
