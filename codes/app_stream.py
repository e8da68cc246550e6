import logging
import time

import cv2

import os, sys
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from expression.config import (
    ANALYSIS_INTERVAL_SEC, CAMERA_INDEX, MIN_DETECTION_CONFIDENCE, load_thresholds, setup_logging,
)
from expression.core import ExpressionAnalyzer
from expression.landmarks import LandmarkDetector
from expression.stream import ExpressionStream

setup_logging()
logger = logging.getLogger("app_stream")


def draw_detections(frame, detections) -> None:
    # OpenCV's Hershey fonts have no emoji glyphs, so only names are drawn
    for i, d in enumerate(detections):
        cv2.putText(frame, f"{d.name} {d.confidence * 100:.0f}%", (30, 50 + 28 * i),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 0), 2)


def main() -> None:
    cap = cv2.VideoCapture(CAMERA_INDEX)
    if not cap.isOpened():
        logger.error(f"Cannot open camera {CAMERA_INDEX}.")
        return
    logger.info(f"Camera {CAMERA_INDEX} connected.")

    with LandmarkDetector(min_detection_confidence=MIN_DETECTION_CONFIDENCE,
                          static_image_mode=False) as detector:
        analyzer = ExpressionAnalyzer(thresholds=load_thresholds(), detector=detector)
        stream = ExpressionStream(analyzer.analyze_image, min_interval=ANALYSIS_INTERVAL_SEC)
        fps_time = time.time()
        try:
            while True:
                ret, frame = cap.read()
                if not ret:
                    logger.warning("No frame from camera.")
                    break

                frame = cv2.flip(frame, 1)
                stream.offer(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
                draw_detections(frame, stream.latest)

                fps = 1.0 / max(1e-6, time.time() - fps_time)
                fps_time = time.time()
                h = frame.shape[0]
                cv2.putText(frame, f"FPS: {fps:.1f}", (30, h - 30),
                            cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1)

                cv2.imshow("Facial Expression Rater (q to quit)", frame)
                if cv2.waitKey(1) & 0xFF == ord('q'):
                    break
        finally:
            cap.release()
            cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
