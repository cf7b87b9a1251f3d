#!/usr/bin/env python3
"""
Capture Booth – gesture / smile triggered photo kiosk
Run with:  python -m capture_booth.main   (or the ``capture-booth`` script)
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

import cv2

from capture_booth import config as cfg
from capture_booth.errors import KeypointSourceError
from capture_booth.hud import draw_hud
from capture_booth.keypoint_source import KeypointSource
from capture_booth.policy import PRESETS, SmileTrigger
from capture_booth.publisher import LocalPublisher
from capture_booth.state_machine import CaptureStateMachine

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="capture-booth",
        description="Camera kiosk that takes your photo when you give it a thumbs-up",
    )
    parser.add_argument(
        "--policy",
        choices=sorted(PRESETS),
        default="strict",
        help="What arms the countdown (default: strict thumbs-up)",
    )
    parser.add_argument(
        "--camera",
        type=int,
        default=cfg.CAMERA_INDEX,
        help="Webcam device index",
    )
    parser.add_argument(
        "-o", "--output",
        default=cfg.OUTPUT_DIR,
        help="Directory for published photo cards",
    )
    parser.add_argument(
        "--no-mesh",
        action="store_true",
        help="Disable the face mesh (face-box emotion heuristics only)",
    )
    parser.add_argument(
        "--no-preview",
        action="store_true",
        help="Run headless",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    policy = PRESETS[args.policy]
    if isinstance(policy, SmileTrigger) and args.no_mesh:
        logger.warning("smile policy without a face mesh falls back to face-box heuristics")

    source = KeypointSource(camera_index=args.camera, use_mesh=not args.no_mesh)
    try:
        source.start()
    except KeypointSourceError as exc:
        logger.error("%s", exc)
        return 1

    booth = CaptureStateMachine(
        policy=policy,
        frame_source=source.current_frame,
        publisher=LocalPublisher(args.output),
    )
    show_preview = cfg.SHOW_PREVIEW and not args.no_preview
    print(f"[Capture Booth] Running with '{args.policy}' trigger – press 'q' in preview or Ctrl-C to quit.")

    last_seq = -1  # track frame sequence to avoid re-processing
    result = None

    try:
        while True:
            detections, frame, seq = source.latest()

            # Only process when a new frame is available
            if seq != last_seq:
                last_seq = seq
                result = booth.process_frame(detections)

            if show_preview and frame is not None and result is not None:
                frame = frame.copy()
                draw_hud(frame, result, detections)
                h, w = frame.shape[:2]
                small = cv2.resize(
                    frame,
                    (int(w * cfg.PREVIEW_SCALE), int(h * cfg.PREVIEW_SCALE)),
                )
                cv2.imshow(cfg.PREVIEW_WINDOW, small)
                key = cv2.waitKey(1) & 0xFF
                if key == ord("q"):
                    break
                if key == ord(" "):
                    booth.dismiss_notice()
                    booth.dismiss_share()
            else:
                # Without preview, sleep briefly to yield CPU
                time.sleep(0.005)

    except KeyboardInterrupt:
        pass
    finally:
        booth.shutdown()
        source.stop()
        if show_preview:
            cv2.destroyAllWindows()
        print("\n[Capture Booth] Stopped.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
