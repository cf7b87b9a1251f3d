"""Synthetic detections and fake collaborators for booth tests."""

from concurrent.futures import Executor, Future

from capture_booth.types import DetectionFrame, FaceBox, HandDetection, HandLandmark as H, Point


# ── hands ────────────────────────────────────────────────────────────
def _hand(points, confidence=0.9):
    keypoints = [Point(0.0, 0.0)] * 21
    for idx, (x, y) in points.items():
        keypoints[idx] = Point(float(x), float(y))
    return HandDetection(keypoints=keypoints, confidence=confidence)


def thumbs_up_hand(confidence=0.9, overrides=None):
    """Upright fist with the thumb pointing straight up (pixel coords)."""
    points = {
        H.WRIST: (300, 400),
        H.THUMB_CMC: (290, 360),
        H.THUMB_MCP: (280, 330),
        H.THUMB_IP: (281, 295),
        H.THUMB_TIP: (282, 260),
        H.INDEX_MCP: (320, 330), H.INDEX_PIP: (345, 330),
        H.INDEX_DIP: (340, 350), H.INDEX_TIP: (330, 355),
        H.MIDDLE_MCP: (320, 350), H.MIDDLE_PIP: (345, 350),
        H.MIDDLE_DIP: (340, 370), H.MIDDLE_TIP: (330, 375),
        H.RING_MCP: (320, 370), H.RING_PIP: (345, 370),
        H.RING_DIP: (340, 390), H.RING_TIP: (330, 395),
        H.PINKY_MCP: (320, 390), H.PINKY_PIP: (343, 390),
        H.PINKY_DIP: (338, 405), H.PINKY_TIP: (330, 410),
    }
    points.update(overrides or {})
    return _hand(points, confidence)


def open_palm_hand(confidence=0.9, index_x=330):
    """Flat hand, fingers up, thumb out to the side."""
    points = {
        H.WRIST: (300, 420),
        H.THUMB_CMC: (280, 400),
        H.THUMB_MCP: (260, 380),
        H.THUMB_IP: (240, 360),
        H.THUMB_TIP: (220, 360),
        H.INDEX_MCP: (index_x, 330), H.INDEX_PIP: (index_x, 290),
        H.INDEX_DIP: (index_x, 270), H.INDEX_TIP: (index_x, 250),
        H.MIDDLE_MCP: (350, 330), H.MIDDLE_PIP: (350, 285),
        H.MIDDLE_DIP: (350, 262), H.MIDDLE_TIP: (350, 240),
        H.RING_MCP: (370, 335), H.RING_PIP: (370, 295),
        H.RING_DIP: (370, 275), H.RING_TIP: (370, 255),
        H.PINKY_MCP: (390, 345), H.PINKY_PIP: (390, 315),
        H.PINKY_DIP: (390, 300), H.PINKY_TIP: (390, 285),
    }
    return _hand(points, confidence)


# ── faces ────────────────────────────────────────────────────────────
NEUTRAL_FACE = FaceBox(500, 200, 200, 200)   # ratio 1.00, area 40000
HAPPY_FACE = FaceBox(500, 200, 200, 240)     # ratio 1.20, area 48000
ANGRY_FACE = FaceBox(500, 200, 220, 180)     # ratio 0.82, area 39600
SMALL_FACE = FaceBox(900, 100, 50, 50)       # area 2500, below the gate


def make_mesh(mouth_width, mouth_height, eye_dist=100.0, size=468):
    """Face mesh with only the mouth and eye-corner landmarks placed."""
    pts = [Point(0.0, 0.0)] * size
    cx, eye_y, mouth_y = 600.0, 280.0, 360.0
    pts[33] = Point(cx - eye_dist / 2, eye_y)
    pts[263] = Point(cx + eye_dist / 2, eye_y)
    pts[61] = Point(cx - mouth_width / 2, mouth_y)
    pts[291] = Point(cx + mouth_width / 2, mouth_y)
    pts[13] = Point(cx, mouth_y - mouth_height / 2)
    pts[14] = Point(cx, mouth_y + mouth_height / 2)
    return pts


def frame(face=None, hands=(), mesh=None):
    return DetectionFrame(face=face, hands=list(hands), mesh=mesh)


# ── collaborators ────────────────────────────────────────────────────
class _FakeTimer:
    def __init__(self, due, interval, fn):
        self.due = due
        self.interval = interval
        self.fn = fn
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Virtual clock; timers only run inside ``advance``."""

    def __init__(self):
        self.now = 0.0
        self._timers = []

    def call_every(self, interval, fn):
        timer = _FakeTimer(self.now + interval, interval, fn)
        self._timers.append(timer)
        return timer

    def call_later(self, delay, fn):
        timer = _FakeTimer(self.now + delay, None, fn)
        self._timers.append(timer)
        return timer

    @property
    def active(self):
        return [t for t in self._timers if not t.cancelled]

    def advance(self, seconds):
        end = self.now + seconds
        while True:
            due = [t for t in self.active if t.due <= end + 1e-9]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.now = timer.due
            if timer.interval is None:
                timer.cancelled = True
            else:
                timer.due += timer.interval
            timer.fn()
        self.now = end


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


class DeferredExecutor(Executor):
    """Holds submitted work until ``run_all`` is called."""

    def __init__(self):
        self.pending = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_all(self):
        pending, self.pending = self.pending, []
        for future, fn, args, kwargs in pending:
            try:
                future.set_result(fn(*args, **kwargs))
            except Exception as exc:
                future.set_exception(exc)


class RecordingPublisher:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def produce_and_publish(self, frame, emotion, theme):
        self.calls.append((frame, emotion, theme))
        if self.error is not None:
            raise self.error
        return f"file:///tmp/booth/card-{len(self.calls)}.png"
