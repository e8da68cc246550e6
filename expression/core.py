# expression/core.py
import logging
from typing import Dict, List, Optional

import numpy as np

from expression.catalog import Expression, detection
from expression.geometry import (
    EPSILON, bbox, box_center, clamp01, eye_aspect_ratio, mean_y,
    point_with_max_x, point_with_min_x, upper_lip_apex_y,
)
from expression.models import Detection, FaceLandmarks, Thresholds

logger = logging.getLogger(__name__)

Scores = Dict[Expression, float]


class ExpressionAnalyzer:
    """
    Landmark heuristics -> facial expressions:
      - eyes: closed / blink / squint / widen, pupil gaze direction
      - brows: raise / lower / furrow relative to the eye box
      - mouth: open / parted / press / pucker / stretch, corner lift and drop
    Rules are independent, so several expressions may fire for one face.
    The analyzer holds no per-call state; `classify` is safe to share across threads.
    """

    def __init__(self, thresholds: Optional[Thresholds] = None, detector=None):
        self.thresholds = thresholds or Thresholds()
        self.detector = detector

    # ---------- pipeline ----------
    def classify(self, landmarks: Optional[FaceLandmarks]) -> List[Detection]:
        """Return detections sorted by display name; no face gives an empty list."""
        if landmarks is None:
            return []
        scores: Scores = {}
        self._eyes(landmarks, scores)
        self._brows(landmarks, scores)
        self._mouth(landmarks, scores)
        result = sorted(
            (detection(expr, clamp01(conf)) for expr, conf in scores.items()),
            key=lambda d: d.name,
        )
        logger.debug("Classified %d expressions: %s", len(result), [d.name for d in result])
        return result

    def analyze_image(self, image_rgb: np.ndarray) -> List[Detection]:
        """Detect landmarks in an RGB image and classify them. Detector failures give []."""
        if self.detector is None:
            raise RuntimeError("No landmark detector configured.")
        try:
            landmarks = self.detector.detect(image_rgb)
        except Exception as e:
            logger.warning(f"Landmark detection failed: {e}")
            return []
        if landmarks is None:
            logger.debug("No face detected")
            return []
        return self.classify(landmarks)

    # ---------- eyes & gaze ----------
    def _eyes(self, lm: FaceLandmarks, scores: Scores) -> None:
        if not (lm.left_eye and lm.right_eye):
            return
        t = self.thresholds
        l_ar, l_w = eye_aspect_ratio(lm.left_eye)
        r_ar, r_w = eye_aspect_ratio(lm.right_eye)
        ar = (l_ar + r_ar) / 2.0

        if ar < t.eye_closed:
            scores[Expression.EYES_CLOSED] = 1 - ar / t.eye_closed
        if l_ar < t.eye_closed and r_ar >= t.eye_closed:
            scores[Expression.LEFT_BLINK] = 1 - l_ar / t.eye_closed
        if r_ar < t.eye_closed and l_ar >= t.eye_closed:
            scores[Expression.RIGHT_BLINK] = 1 - r_ar / t.eye_closed

        for expr, value in ((Expression.EYES_SQUINT, ar),
                            (Expression.LEFT_EYE_SQUINT, l_ar),
                            (Expression.RIGHT_EYE_SQUINT, r_ar)):
            if value < t.eye_squint:
                scores[expr] = min(1.0, (t.eye_squint - value) / t.eye_squint)

        if ar > t.eye_widen:
            scores[Expression.EYES_WIDEN] = min(1.0, (ar - t.eye_widen) / t.eye_widen_span)

        if lm.left_pupil and lm.right_pupil:
            self._gaze(lm, l_w, r_w, scores)

    def _gaze(self, lm: FaceLandmarks, l_w: float, r_w: float, scores: Scores) -> None:
        t = self.thresholds
        l_box, r_box = bbox(lm.left_eye), bbox(lm.right_eye)
        (lcx, lcy), (rcx, rcy) = box_center(l_box), box_center(r_box)
        lpx, lpy = lm.left_pupil[0]
        rpx, rpy = lm.right_pupil[0]

        off_x = ((lpx - lcx) / max(EPSILON, l_w) + (rpx - rcx) / max(EPSILON, r_w)) / 2.0
        off_y = ((lpy - lcy) / max(EPSILON, l_box.height)
                 + (rpy - rcy) / max(EPSILON, r_box.height)) / 2.0

        if off_x < -t.gaze_offset:
            scores[Expression.GAZE_LEFT] = min(1.0, abs(off_x) / t.gaze_span)
        if off_x > t.gaze_offset:
            scores[Expression.GAZE_RIGHT] = min(1.0, abs(off_x) / t.gaze_span)
        if off_y > t.gaze_offset:
            scores[Expression.GAZE_UP] = min(1.0, abs(off_y) / t.gaze_span)
        if off_y < -t.gaze_offset:
            scores[Expression.GAZE_DOWN] = min(1.0, abs(off_y) / t.gaze_span)

    # ---------- brows ----------
    def _brows(self, lm: FaceLandmarks, scores: Scores) -> None:
        if not (lm.left_eyebrow and lm.right_eyebrow and lm.left_eye and lm.right_eye):
            return
        t = self.thresholds
        l_delta = mean_y(lm.left_eyebrow) - bbox(lm.left_eye).max_y
        r_delta = mean_y(lm.right_eyebrow) - bbox(lm.right_eye).max_y

        if l_delta > t.brow_raise and r_delta > t.brow_raise:
            scores[Expression.BOTH_BROWS_RAISED] = min(1.0, max(l_delta, r_delta))
        if l_delta > t.brow_raise:
            scores[Expression.LEFT_BROW_RAISE] = min(1.0, l_delta)
        if r_delta > t.brow_raise:
            scores[Expression.RIGHT_BROW_RAISE] = min(1.0, r_delta)
        if l_delta < t.brow_lowered:
            scores[Expression.LEFT_BROW_LOWERED] = min(1.0, (t.brow_lowered - l_delta) / t.brow_lowered)
        if r_delta < t.brow_lowered:
            scores[Expression.RIGHT_BROW_LOWERED] = min(1.0, (t.brow_lowered - r_delta) / t.brow_lowered)

        inner_gap = max(0.0, bbox(lm.right_eyebrow).min_x - bbox(lm.left_eyebrow).max_x)
        if inner_gap < t.brow_furrow_gap:
            scores[Expression.BROW_FURROW] = min(1.0, (t.brow_furrow_gap - inner_gap) / t.brow_furrow_gap)

    # ---------- mouth ----------
    def _mouth(self, lm: FaceLandmarks, scores: Scores) -> None:
        if not lm.outer_lips:
            return
        t = self.thresholds
        m_box = bbox(lm.outer_lips)
        width = m_box.width
        center_y = box_center(m_box)[1]

        if lm.inner_lips:
            opening = bbox(lm.inner_lips).height / max(EPSILON, width)
            if opening > t.mouth_open_wide:
                scores[Expression.MOUTH_OPEN_WIDE] = min(1.0, (opening - t.mouth_open_wide) / t.mouth_open_wide_span)
            if opening > t.lips_parted:
                scores[Expression.LIPS_PARTED] = min(1.0, (opening - t.lips_parted) / t.lips_parted_span)
            if opening < t.lip_press:
                scores[Expression.LIP_PRESS] = min(1.0, (t.lip_press - opening) / t.lip_press)

            lift = upper_lip_apex_y(lm.inner_lips) - center_y
            if lift > t.upper_lip_raise:
                scores[Expression.UPPER_LIP_RAISE] = min(1.0, (lift - t.upper_lip_raise) / t.upper_lip_raise_span)

        if width < t.lip_pucker_width:
            scores[Expression.LIP_PUCKER] = min(1.0, (t.lip_pucker_width - width) / t.lip_pucker_span)
        if width > t.mouth_stretch_width:
            scores[Expression.MOUTH_STRETCH] = min(1.0, (width - t.mouth_stretch_width) / t.mouth_stretch_span)

        self._corners(
            point_with_min_x(lm.outer_lips)[1] - center_y,
            point_with_max_x(lm.outer_lips)[1] - center_y,
            scores,
        )

    def _corners(self, left_dy: float, right_dy: float, scores: Scores) -> None:
        t = self.thresholds
        avg_dy = (left_dy + right_dy) / 2.0

        if left_dy > t.smile and right_dy > t.smile:
            scores[Expression.SMILE] = min(1.0, max(0.0, avg_dy - t.smile) / t.corner_span)
        if left_dy < -t.frown and right_dy < -t.frown:
            scores[Expression.FROWN] = min(1.0, max(0.0, -avg_dy - t.frown) / t.corner_span)

        # one corner lifted past the margin while the other stays near neutral
        smirk = t.smile + t.smirk_margin
        neutral = t.smile * t.smirk_neutral_factor
        if left_dy > smirk and right_dy < neutral:
            scores[Expression.LEFT_SMIRK] = min(1.0, (left_dy - t.smile) / t.asymmetric_span)
        if right_dy > smirk and left_dy < neutral:
            scores[Expression.RIGHT_SMIRK] = min(1.0, (right_dy - t.smile) / t.asymmetric_span)

        downturn = -(t.frown + t.smirk_margin)
        if left_dy < downturn:
            scores[Expression.LEFT_CORNER_DOWNTURN] = min(1.0, (abs(left_dy) - t.frown) / t.asymmetric_span)
        if right_dy < downturn:
            scores[Expression.RIGHT_CORNER_DOWNTURN] = min(1.0, (abs(right_dy) - t.frown) / t.asymmetric_span)


_DEFAULT = ExpressionAnalyzer()


def classify(landmarks: Optional[FaceLandmarks], thresholds: Optional[Thresholds] = None) -> List[Detection]:
    analyzer = _DEFAULT if thresholds is None else ExpressionAnalyzer(thresholds)
    return analyzer.classify(landmarks)
