"""
Capture Booth – Publisher
Renders the captured frame into a keepsake card and publishes it,
returning a link the visitor can open.

The booth only depends on the ``Publisher`` protocol.  ``LocalPublisher``
writes PNG cards to a directory and hands back ``file://`` links, which
is enough for a standalone kiosk or for plugging in a real uploader.
"""

from __future__ import annotations

import logging
import time
import uuid
from pathlib import Path
from typing import Optional, Protocol, Union

import cv2
import numpy as np

from . import config as cfg
from .errors import PublishError
from .types import Emotion

logger = logging.getLogger(__name__)

_BANNER_HEIGHT = 96
_BANNER_COLOUR = (30, 30, 30)
_TEXT_COLOUR = (255, 255, 255)


class Publisher(Protocol):
    def produce_and_publish(
        self, frame: Optional[np.ndarray], emotion: Emotion, theme: str
    ) -> str:
        """Return a share link, or raise ``PublishError``."""
        ...


class LocalPublisher:
    """Write captioned PNG cards under *output_dir*."""

    def __init__(self, output_dir: Union[str, Path] = cfg.OUTPUT_DIR) -> None:
        self.output_dir = Path(output_dir)

    def produce_and_publish(
        self, frame: Optional[np.ndarray], emotion: Emotion, theme: str
    ) -> str:
        if frame is None or frame.size == 0:
            raise PublishError("no frame was captured")

        card = render_card(frame, emotion, theme, time.strftime("%Y-%m-%d %H:%M:%S"))

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PublishError(f"cannot create {self.output_dir}: {exc}") from exc

        path = self.output_dir / f"{int(time.time() * 1000)}-{uuid.uuid4().hex}.png"
        if not cv2.imwrite(str(path), card):
            raise PublishError(f"failed to write {path}")

        logger.info("published %s card to %s", emotion.value, path)
        return path.resolve().as_uri()


def render_card(frame: np.ndarray, emotion: Emotion, theme: str, stamp: str) -> np.ndarray:
    """Frame with a caption banner underneath."""
    if frame.ndim == 2:
        frame = cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
    w = frame.shape[1]
    banner = np.full((_BANNER_HEIGHT, w, 3), _BANNER_COLOUR, dtype=np.uint8)

    cv2.putText(banner, f"Mood: {emotion.value}", (16, 34),
                cv2.FONT_HERSHEY_SIMPLEX, 0.9, _TEXT_COLOUR, 2)
    cv2.putText(banner, theme, (16, 64),
                cv2.FONT_HERSHEY_SIMPLEX, 0.6, _TEXT_COLOUR, 1)
    cv2.putText(banner, stamp, (16, 88),
                cv2.FONT_HERSHEY_SIMPLEX, 0.5, (180, 180, 180), 1)

    return np.vstack([frame.astype(np.uint8), banner])
