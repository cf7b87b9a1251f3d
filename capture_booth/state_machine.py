"""
Capture Booth – Capture State Machine
Owns the session phase and sequences one capture:

    idle ──(trigger held)──▶ armed ──(countdown hits 0)──▶ generating
      ▲                                                        │
      └──────────(flourish + hold elapsed)── done ◀──(publish finished)

``process_frame`` is the per-frame step and the only place detections
enter.  The countdown and the done-hold run on the scheduler; every timer
callback carries the session id it was started for and is ignored once
that session has moved on.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from . import config as cfg
from .emotion import EmotionEstimator, SmoothingState
from .errors import PublishError
from .gesture import GestureEstimator
from .hold_filter import HoldFilter
from .policy import GestureTrigger, TriggerPolicy
from .scheduler import Scheduler, ThreadScheduler, TimerHandle
from .types import EMOTION_THEMES, DetectionFrame, Emotion, Phase
from .votes import VoteAggregator

if TYPE_CHECKING:
    from .publisher import Publisher

logger = logging.getLogger(__name__)

EFFECT_BY_EMOTION = {
    Emotion.HAPPY: "aura",
    Emotion.ANGRY: "flames",
    Emotion.SURPRISED: "shockwave",
    Emotion.NEUTRAL: "standby",
}


@dataclass(frozen=True)
class Timings:
    min_face_area: float = cfg.MIN_FACE_AREA
    countdown_seconds: int = cfg.COUNTDOWN_SECONDS
    tick_interval: float = cfg.COUNTDOWN_TICK_S
    check_interval: float = cfg.COUNTDOWN_CHECK_S
    done_flourish: float = cfg.DONE_FLOURISH_S
    done_hold: float = cfg.DONE_HOLD_S
    wave_dx: float = cfg.WAVE_DX
    wave_count: int = cfg.WAVE_COUNT
    wave_effect_frames: int = cfg.WAVE_EFFECT_FRAMES


@dataclass
class SessionState:
    """All mutable per-session state.  Reset at transitions, never rebuilt."""
    hold: HoldFilter
    phase: Phase = Phase.IDLE
    countdown: int = cfg.COUNTDOWN_SECONDS
    emotion: Emotion = Emotion.NEUTRAL
    effect: str = "standby"
    last_face_area: float = 0.0
    smoothing: SmoothingState = field(default_factory=SmoothingState)
    votes: VoteAggregator = field(default_factory=VoteAggregator)
    face_seen: bool = False
    hand_count: int = 0
    last_hand_x: Optional[float] = None
    wave_count: int = 0
    beam_frames: int = 0
    session_id: int = 0
    dominant: Optional[Emotion] = None
    share_url: str = ""
    notice: str = ""


@dataclass(frozen=True)
class FrameResult:
    """Visible state for the presentation layer after one frame."""
    phase: Phase
    emotion: Emotion
    effect: str
    countdown: int
    hud: Dict[str, str]
    dominant: Optional[Emotion] = None
    share_url: str = ""
    notice: str = ""


class CaptureStateMachine:
    """
    One booth, one subject at a time.

    *frame_source* returns the current camera image when the countdown
    ends; *publisher* turns it into a share link.  The publish call runs
    on *executor* so the frame loop never waits for it.
    """

    def __init__(
        self,
        policy: TriggerPolicy,
        frame_source: Callable[[], Any],
        publisher: "Publisher",
        scheduler: Optional[Scheduler] = None,
        executor: Optional[Executor] = None,
        emotion_estimator: Optional[EmotionEstimator] = None,
        timings: Optional[Timings] = None,
    ) -> None:
        self.policy = policy
        self.timings = timings or Timings()
        self._frame_source = frame_source
        self._publisher = publisher
        self._scheduler = scheduler or ThreadScheduler()
        self._own_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="publish"
        )
        self._emotion = emotion_estimator or EmotionEstimator()
        self._gesture: Optional[GestureEstimator] = None
        if isinstance(policy, GestureTrigger):
            self._gesture = GestureEstimator(policy.gesture)

        self.state = SessionState(
            hold=HoldFilter(policy.hold),
            countdown=self.timings.countdown_seconds,
        )
        self._lock = threading.RLock()
        self._timers: List[TimerHandle] = []
        self._pending: Optional[Future] = None

    # ── public ───────────────────────────────────────────────────────
    @property
    def phase(self) -> Phase:
        return self.state.phase

    def process_frame(self, detections: DetectionFrame) -> FrameResult:
        """Advance the session by one camera frame."""
        with self._lock:
            s = self.state
            label, s.last_face_area = self._emotion.estimate(
                detections.face, detections.mesh, s.last_face_area, s.smoothing
            )
            s.emotion = label
            s.face_seen = detections.face is not None
            s.hand_count = len(detections.hands)

            if s.phase == Phase.IDLE:
                self._idle_step(detections, label)
            else:
                # cooldown counts frames in every phase
                s.hold.gate.tick()
                if s.phase == Phase.ARMED:
                    s.votes.add(label)

            self._update_effect(detections, label)
            return self._result()

    def dismiss_notice(self) -> None:
        with self._lock:
            self.state.notice = ""

    def dismiss_share(self) -> None:
        with self._lock:
            self.state.share_url = ""

    def shutdown(self) -> None:
        """Cancel every outstanding timer; safe to call more than once."""
        with self._lock:
            self._cancel_timers()
            self.state.session_id += 1
        if self._own_executor:
            self._executor.shutdown(wait=False)

    # ── idle ─────────────────────────────────────────────────────────
    def _idle_step(self, det: DetectionFrame, label: Emotion) -> None:
        s = self.state
        face = det.face
        if face is None or face.area <= self.timings.min_face_area:
            # no accumulation across face loss or from background faces
            s.hold.reset()
            s.hold.gate.tick()
            return

        if s.hold.update(self._trigger_signal(det, label)):
            self._arm()

    def _trigger_signal(self, det: DetectionFrame, label: Emotion) -> bool:
        if self._gesture is not None:
            return self._gesture.estimate(det.hands)
        return label == Emotion.HAPPY

    def _arm(self) -> None:
        s = self.state
        s.session_id += 1
        s.phase = Phase.ARMED
        s.countdown = self.timings.countdown_seconds
        s.votes.reset()
        s.dominant = None
        s.share_url = ""
        s.notice = ""
        logger.info("armed (session %d), %ds countdown", s.session_id, s.countdown)

        sid = s.session_id
        self._timers = [
            self._scheduler.call_every(self.timings.tick_interval, partial(self._on_tick, sid)),
            self._scheduler.call_every(self.timings.check_interval, partial(self._on_check, sid)),
        ]

    # ── armed ────────────────────────────────────────────────────────
    def _on_tick(self, sid: int) -> None:
        with self._lock:
            if not self._current(sid, Phase.ARMED):
                return
            self.state.countdown = max(0, self.state.countdown - 1)

    def _on_check(self, sid: int) -> None:
        with self._lock:
            if not self._current(sid, Phase.ARMED):
                return
            if self.state.countdown <= 0:
                self._capture()

    def _capture(self) -> None:
        s = self.state
        self._cancel_timers()

        frame = None
        try:
            frame = self._frame_source()
        except Exception:
            logger.exception("could not grab the capture frame")

        s.dominant = s.votes.dominant()
        theme = EMOTION_THEMES[s.dominant]
        s.phase = Phase.GENERATING
        logger.info("captured (session %d), votes %s → %s",
                    s.session_id, s.votes.snapshot(), s.dominant.value)

        self._pending = self._executor.submit(
            self._publisher.produce_and_publish, frame, s.dominant, theme
        )
        self._pending.add_done_callback(partial(self._on_published, s.session_id))

    # ── generating ───────────────────────────────────────────────────
    def _on_published(self, sid: int, future: Future) -> None:
        with self._lock:
            if not self._current(sid, Phase.GENERATING):
                return
            s = self.state
            self._pending = None
            try:
                s.share_url = future.result()
                logger.info("share link ready: %s", s.share_url)
            except PublishError as exc:
                logger.error("publish failed: %s", exc)
                s.notice = f"Upload failed: {exc}"
            except Exception as exc:
                logger.exception("publish failed unexpectedly")
                s.notice = f"Upload failed: {exc}"

            s.phase = Phase.DONE
            s.effect = "heart"
            hold = self.timings.done_flourish + self.timings.done_hold
            self._timers = [self._scheduler.call_later(hold, partial(self._on_done, sid))]

    # ── done ─────────────────────────────────────────────────────────
    def _on_done(self, sid: int) -> None:
        with self._lock:
            if not self._current(sid, Phase.DONE):
                return
            s = self.state
            self._timers = []
            s.phase = Phase.IDLE
            s.effect = "standby"
            s.beam_frames = 0
            s.wave_count = 0
            s.countdown = self.timings.countdown_seconds
            logger.info("back to idle (session %d)", sid)

    # ── helpers ──────────────────────────────────────────────────────
    def _current(self, sid: int, phase: Phase) -> bool:
        return sid == self.state.session_id and self.state.phase == phase

    def _cancel_timers(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers = []

    def _update_effect(self, det: DetectionFrame, label: Emotion) -> None:
        s = self.state
        if s.phase == Phase.IDLE:
            self._track_wave(det)
            if s.beam_frames > 0:
                s.beam_frames -= 1
                s.effect = "beam"
            else:
                s.effect = EFFECT_BY_EMOTION[label]
        elif s.phase in (Phase.ARMED, Phase.GENERATING):
            s.effect = "beam"
        else:
            s.effect = "heart"

    def _track_wave(self, det: DetectionFrame) -> None:
        """Idle flourish: repeated side-to-side index-finger jumps."""
        s = self.state
        if not det.hands:
            return
        tip = det.hands[0].index_tip
        if tip is None:
            return
        if s.last_hand_x is not None and abs(tip.x - s.last_hand_x) > self.timings.wave_dx:
            s.wave_count += 1
            if s.wave_count > self.timings.wave_count:
                s.beam_frames = self.timings.wave_effect_frames
                s.wave_count = 0
        s.last_hand_x = tip.x

    def _result(self) -> FrameResult:
        s = self.state
        hud = {
            "face": "✓" if s.face_seen else "—",
            "hands": str(s.hand_count),
            "emotion": s.emotion.value,
            "phase": s.phase.value,
            "countdown": str(s.countdown),
        }
        return FrameResult(
            phase=s.phase,
            emotion=s.emotion,
            effect=s.effect,
            countdown=s.countdown,
            hud=hud,
            dominant=s.dominant,
            share_url=s.share_url,
            notice=s.notice,
        )
