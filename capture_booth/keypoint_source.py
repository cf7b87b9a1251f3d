"""
Capture Booth – Keypoint Source
Threaded webcam capture + MediaPipe face detection, hands and face mesh.
Keeps the main loop free of I/O blocking.

The three models run concurrently on every captured frame and the
snapshot is only published once all of them have answered.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

import cv2
import mediapipe as mp
import numpy as np

from . import config as cfg
from .errors import KeypointSourceError
from .types import DetectionFrame, FaceBox, HandDetection, Point

logger = logging.getLogger(__name__)


class KeypointSource:
    """
    Runs webcam capture in a background thread and exposes the latest
    detections via :pymethod:`latest()`.
    """

    def __init__(
        self,
        camera_index: int = cfg.CAMERA_INDEX,
        use_mesh: bool = cfg.MP_USE_FACE_MESH,
    ) -> None:
        self._camera_index = camera_index
        self._use_mesh = use_mesh

        self._face = None
        self._hands = None
        self._mesh = None
        self._pool: Optional[ThreadPoolExecutor] = None

        self._cap: Optional[cv2.VideoCapture] = None
        self._lock = threading.Lock()
        self._detections = DetectionFrame()
        self._frame: Optional[np.ndarray] = None
        self._frame_seq: int = 0          # bumped each new frame
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._frame_interval = 1.0 / cfg.TARGET_FPS

    # ── public API ───────────────────────────────────────────────────
    def start(self) -> None:
        """Load the models, open the webcam and begin the capture thread."""
        try:
            self._face = mp.solutions.face_detection.FaceDetection(
                model_selection=cfg.MP_FACE_MODEL_SELECTION,
                min_detection_confidence=cfg.MP_DETECTION_CONFIDENCE,
            )
            self._hands = mp.solutions.hands.Hands(
                static_image_mode=False,
                max_num_hands=cfg.MP_MAX_HANDS,
                model_complexity=cfg.MP_HAND_MODEL_COMPLEXITY,
                min_detection_confidence=cfg.MP_DETECTION_CONFIDENCE,
                min_tracking_confidence=cfg.MP_TRACKING_CONFIDENCE,
            )
            if self._use_mesh:
                self._mesh = mp.solutions.face_mesh.FaceMesh(
                    static_image_mode=False,
                    max_num_faces=cfg.MP_MAX_FACES,
                    min_detection_confidence=cfg.MP_DETECTION_CONFIDENCE,
                    min_tracking_confidence=cfg.MP_TRACKING_CONFIDENCE,
                )
        except Exception as exc:
            self._close_models()
            raise KeypointSourceError(f"MediaPipe models failed to load: {exc}") from exc

        self._cap = cv2.VideoCapture(self._camera_index)
        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, cfg.CAPTURE_WIDTH)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, cfg.CAPTURE_HEIGHT)
        self._cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)  # drop stale frames

        if not self._cap.isOpened():
            self._cap.release()
            self._close_models()
            raise KeypointSourceError(f"Cannot open camera {self._camera_index}")

        self._pool = ThreadPoolExecutor(max_workers=3, thread_name_prefix="keypoints")
        self._running = True
        self._thread = threading.Thread(target=self._loop, daemon=True)
        self._thread.start()
        logger.info("keypoint source started on camera %d", self._camera_index)

    def stop(self) -> None:
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=2)
        if self._cap is not None:
            self._cap.release()
        if self._pool is not None:
            self._pool.shutdown(wait=True)
        self._close_models()

    def latest(self) -> Tuple[DetectionFrame, Optional[np.ndarray], int]:
        """Return the most recent (detections, frame, seq) snapshot."""
        with self._lock:
            return self._detections, self._frame, self._frame_seq

    def current_frame(self) -> Optional[np.ndarray]:
        """Copy of the latest camera image, for the capture itself."""
        with self._lock:
            return None if self._frame is None else self._frame.copy()

    # ── per-model estimation (RGB input) ─────────────────────────────
    def estimate_face(self, rgb: np.ndarray) -> Optional[FaceBox]:
        results = self._face.process(rgb)
        if not results.detections:
            return None
        h, w = rgb.shape[:2]
        best = max(results.detections, key=lambda d: d.score[0] if d.score else 0.0)
        box = best.location_data.relative_bounding_box
        return FaceBox(box.xmin * w, box.ymin * h, box.width * w, box.height * h)

    def estimate_hands(self, rgb: np.ndarray) -> List[HandDetection]:
        results = self._hands.process(rgb)
        if not results.multi_hand_landmarks:
            return []
        h, w = rgb.shape[:2]
        hands = []
        for i, hl in enumerate(results.multi_hand_landmarks):
            score = 1.0
            if results.multi_handedness and i < len(results.multi_handedness):
                score = results.multi_handedness[i].classification[0].score
            keypoints = [Point(lm.x * w, lm.y * h) for lm in hl.landmark]
            hands.append(HandDetection(keypoints=keypoints, confidence=score))
        return hands

    def estimate_mesh(self, rgb: np.ndarray) -> Optional[List[Point]]:
        if self._mesh is None:
            return None
        results = self._mesh.process(rgb)
        if not results.multi_face_landmarks:
            return None
        h, w = rgb.shape[:2]
        return [Point(lm.x * w, lm.y * h) for lm in results.multi_face_landmarks[0].landmark]

    # ── capture loop (runs in background thread) ─────────────────────
    def _loop(self) -> None:
        while self._running:
            t0 = time.perf_counter()

            ok, frame = self._cap.read()
            if not ok:
                continue

            if cfg.MIRROR:
                frame = cv2.flip(frame, 1)

            # MediaPipe expects RGB
            rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
            rgb.flags.writeable = False

            face_f = self._pool.submit(self.estimate_face, rgb)
            hands_f = self._pool.submit(self.estimate_hands, rgb)
            mesh_f = self._pool.submit(self.estimate_mesh, rgb)
            detections = DetectionFrame(
                face=face_f.result(),
                hands=hands_f.result(),
                mesh=mesh_f.result(),
            )

            with self._lock:
                self._detections = detections
                self._frame = frame
                self._frame_seq += 1

            # Rate-limit to TARGET_FPS
            elapsed = time.perf_counter() - t0
            sleep_time = self._frame_interval - elapsed
            if sleep_time > 0:
                time.sleep(sleep_time)

    def _close_models(self) -> None:
        for model in (self._face, self._hands, self._mesh):
            if model is not None:
                model.close()
        self._face = self._hands = self._mesh = None
