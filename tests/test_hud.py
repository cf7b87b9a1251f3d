"""Tests for HUD text and drawing."""

import cv2
import numpy as np

from capture_booth.hud import PROMPT, draw_hud, qr_image, title_for
from capture_booth.policy import PRESETS, GestureTrigger, SmileTrigger
from capture_booth.gesture import LooseThumbsUp, StrictThumbsUp
from capture_booth.state_machine import FrameResult
from capture_booth.types import Emotion, Phase

from helpers import NEUTRAL_FACE, frame, thumbs_up_hand


def _result(phase=Phase.IDLE, effect="standby", countdown=10, **kwargs):
    return FrameResult(
        phase=phase,
        emotion=Emotion.NEUTRAL,
        effect=effect,
        countdown=countdown,
        hud={"face": "—", "hands": "0", "emotion": "neutral", "phase": phase.value},
        **kwargs,
    )


class TestTitle:
    def test_armed_shows_seconds_left(self):
        assert title_for(_result(Phase.ARMED, countdown=7)) == "Capturing... 7s"

    def test_generating(self):
        assert title_for(_result(Phase.GENERATING)) == "Generating..."

    def test_done(self):
        assert title_for(_result(Phase.DONE, effect="heart")) == "Your photo is ready"

    def test_idle_follows_effect(self):
        assert title_for(_result(effect="aura")) == "HAPPY HERO"
        assert title_for(_result(effect="flames")) == "RAGE MODE"
        assert title_for(_result(effect="shockwave")) == "SHOCKWAVE"

    def test_idle_default(self):
        assert title_for(_result()) not in ("", PROMPT)


def test_draw_hud_marks_the_frame():
    image = np.zeros((720, 1280, 3), dtype=np.uint8)
    draw_hud(
        image,
        _result(Phase.ARMED, effect="beam", countdown=3),
        frame(face=NEUTRAL_FACE, hands=[thumbs_up_hand()]),
    )
    assert image.any()


def test_draw_hud_with_notice():
    image = np.zeros((480, 640, 3), dtype=np.uint8)
    draw_hud(image, _result(Phase.DONE, effect="heart", notice="Upload failed: x"))
    assert image[-30:].any()


SHARE_URL = "file:///tmp/booth/card-1.png"


class TestShareQr:
    def test_drawn_code_decodes_to_share_link(self):
        image = np.zeros((720, 1280, 3), dtype=np.uint8)
        draw_hud(image, _result(Phase.DONE, effect="heart", share_url=SHARE_URL))
        text, _, _ = cv2.QRCodeDetector().detectAndDecode(image[:, 640:])
        assert text == SHARE_URL

    def test_no_panel_without_share_link(self):
        image = np.zeros((720, 1280, 3), dtype=np.uint8)
        draw_hud(image, _result(Phase.DONE, effect="heart"))
        text, _, _ = cv2.QRCodeDetector().detectAndDecode(image)
        assert text == ""

    def test_code_fits_requested_size(self):
        assert qr_image(SHARE_URL, 240).shape[0] <= 240

    def test_tiny_frame_gets_no_panel(self):
        with_link = np.zeros((120, 160, 3), dtype=np.uint8)
        without = with_link.copy()
        draw_hud(with_link, _result(Phase.DONE, effect="heart", share_url=SHARE_URL))
        draw_hud(without, _result(Phase.DONE, effect="heart"))
        # only the footer text differs
        assert np.array_equal(with_link[:64], without[:64])


def test_presets():
    assert isinstance(PRESETS["strict"], GestureTrigger)
    assert isinstance(PRESETS["strict"].gesture, StrictThumbsUp)
    assert PRESETS["strict"].hold.threshold == 36
    assert isinstance(PRESETS["loose"].gesture, LooseThumbsUp)
    assert isinstance(PRESETS["smile"], SmileTrigger)
    assert PRESETS["smile"].hold.threshold == 1
