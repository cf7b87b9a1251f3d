"""
Capture Booth – Configuration
All tuneable knobs live here so nothing is scattered across modules.
Pixel thresholds assume the 1280x720 capture below.
"""

# ── Camera ───────────────────────────────────────────────────────────
CAMERA_INDEX = 0                # webcam device index
CAPTURE_WIDTH = 1280
CAPTURE_HEIGHT = 720
TARGET_FPS = 60                 # the hold thresholds are tuned for ~60 Hz
MIRROR = True                   # flip horizontally for a natural selfie view

# ── MediaPipe ────────────────────────────────────────────────────────
MP_MAX_HANDS = 2
MP_MAX_FACES = 1
MP_DETECTION_CONFIDENCE = 0.5
MP_TRACKING_CONFIDENCE = 0.5
MP_HAND_MODEL_COMPLEXITY = 0    # 0 = lite (fastest), 1 = full
MP_FACE_MODEL_SELECTION = 0     # 0 = short range, 1 = full range
MP_USE_FACE_MESH = True         # mesh drives the smile path

# ── Emotion: mesh smile path ─────────────────────────────────────────
EYE_DIST_ALPHA = 0.25           # EMA factor for inter-eye distance
MOUTH_ALPHA = 0.35              # EMA factor for mouth width / height ratios
BASELINE_ALPHA = 0.02           # neutral mouth-width baseline, adapts slowly
BASELINE_CLAMP = 1.25           # width samples are clamped before blending
OPEN_MOUTH_RATIO = 0.65         # height ratio above this reads as an "O"
OPEN_MOUTH_PENALTY = 0.5        # smile score multiplier for an open mouth
SMILE_MARGIN = 0.055            # score needed to label "happy"

# ── Emotion: face-box fallback ───────────────────────────────────────
ANGRY_RATIO = 0.88              # height / width below this → angry
BOX_HAPPY_RATIO = 1.12          # height / width above this → happy (no mesh only)
SURPRISE_AREA_CHANGE = 0.22     # relative frame-to-frame area jump → surprised

# ── Gesture: strict thumbs-up ────────────────────────────────────────
STRICT_MIN_CONFIDENCE = 0.7
STRICT_MAX_THUMB_ANGLE = 30.0   # degrees away from straight up (25–40 sane)
STRICT_CURL_MARGIN = 12.0       # fingertip must sit this far below its PIP
STRICT_PALM_MARGIN = 8.0        # wrist.y must exceed index MCP.y minus this

# ── Gesture: loose thumbs-up ─────────────────────────────────────────
LOOSE_TIP_MARGIN = 10.0         # thumb tip above index/middle tips by this

# ── Hold filter / cooldown ───────────────────────────────────────────
# ~0.6 s of stable thumbs-up at ~60 fps.
HOLD_THRESHOLD = 36
HOLD_DECAY_STEP = 3             # falling is faster than rising
COOLDOWN_FRAMES = 60            # ~1 s before the filter may fire again
LOOSE_HOLD_THRESHOLD = 12
SMILE_HOLD_THRESHOLD = 1

# ── Capture sequence ─────────────────────────────────────────────────
MIN_FACE_AREA = 8000            # px², rejects far-background faces
COUNTDOWN_SECONDS = 10
COUNTDOWN_TICK_S = 1.0          # visible "N seconds left" ticker
COUNTDOWN_CHECK_S = 0.15        # zero-crossing check
DONE_FLOURISH_S = 0.8
DONE_HOLD_S = 2.5

# ── Idle wave flourish ───────────────────────────────────────────────
WAVE_DX = 35.0                  # index-tip jump (px) counted as one wave
WAVE_COUNT = 5                  # more than this many waves → beam effect
WAVE_EFFECT_FRAMES = 30

# ── Output ───────────────────────────────────────────────────────────
OUTPUT_DIR = "captures"

# ── Debug / UI ───────────────────────────────────────────────────────
SHOW_PREVIEW = True
PREVIEW_SCALE = 0.6
PREVIEW_WINDOW = "Capture Booth"
