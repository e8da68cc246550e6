# expression/landmarks.py
"""
MediaPipe FaceMesh -> FaceLandmarks.

Regions are named from the viewer's side of the image: `left_*` is the
region with the smaller x. Points are re-normalized to the face bounding
box with y flipped upward, which is the space the classifier thresholds
are tuned in.
"""
import logging
import threading
from typing import Dict, Optional, Tuple

import numpy as np
import mediapipe as mp

from expression.models import FaceLandmarks

logger = logging.getLogger(__name__)

MESH_POINTS = 468
MESH_POINTS_WITH_IRIS = 478

# Landmark indices (viewer-left = subject's right in an unmirrored frame)
REGION_INDICES: Dict[str, Tuple[int, ...]] = {
    "left_eye": (33, 246, 161, 160, 159, 158, 157, 173, 133, 155, 154, 153, 145, 144, 163, 7),
    "right_eye": (362, 398, 384, 385, 386, 387, 388, 466, 263, 249, 390, 373, 374, 380, 381, 382),
    "left_eyebrow": (70, 63, 105, 66, 107, 55, 65, 52, 53, 46),
    "right_eyebrow": (336, 296, 334, 293, 300, 276, 283, 282, 295, 285),
    "outer_lips": (61, 185, 40, 39, 37, 0, 267, 269, 270, 409, 291,
                   375, 321, 405, 314, 17, 84, 181, 91, 146),
    "inner_lips": (78, 191, 80, 81, 82, 13, 312, 311, 310, 415, 308,
                   324, 318, 402, 317, 14, 87, 178, 88, 95),
}
PUPIL_INDICES: Dict[str, Tuple[int, ...]] = {
    "left_pupil": (468,),
    "right_pupil": (473,),
}


def regions_from_mesh(points: np.ndarray) -> Optional[FaceLandmarks]:
    """
    Convert image-normalized mesh points (N x 2 or N x 3, y down) into face-box
    normalized regions. Pupils are left empty when the mesh has no iris points.
    Returns None when the face box is degenerate.
    """
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[0] < MESH_POINTS:
        return None
    pts = pts[:, :2]
    face = pts[:MESH_POINTS]
    lo, hi = face.min(axis=0), face.max(axis=0)
    span = hi - lo
    if np.any(span <= 0):
        return None

    norm = np.empty_like(pts)
    norm[:, 0] = (pts[:, 0] - lo[0]) / span[0]
    norm[:, 1] = (hi[1] - pts[:, 1]) / span[1]

    indices = dict(REGION_INDICES)
    if pts.shape[0] >= MESH_POINTS_WITH_IRIS:
        indices.update(PUPIL_INDICES)
    return FaceLandmarks.from_regions({
        name: norm[list(idx)].tolist() for name, idx in indices.items()
    })


class LandmarkDetector:
    """Single-face MediaPipe FaceMesh with iris refinement. One graph, serialized across threads."""

    def __init__(self, min_detection_confidence: float = 0.5, static_image_mode: bool = True):
        self.min_detection_confidence = min_detection_confidence
        self.static_image_mode = static_image_mode
        self._mesh = None
        self._lock = threading.Lock()

    def _face_mesh(self):
        if self._mesh is None:
            self._mesh = mp.solutions.face_mesh.FaceMesh(
                static_image_mode=self.static_image_mode,
                max_num_faces=1,
                refine_landmarks=True,
                min_detection_confidence=self.min_detection_confidence,
                min_tracking_confidence=0.5,
            )
        return self._mesh

    def detect(self, image_rgb: np.ndarray) -> Optional[FaceLandmarks]:
        """Return the first face's regions, or None when no face is found."""
        with self._lock:
            res = self._face_mesh().process(image_rgb)
        if not res.multi_face_landmarks:
            return None
        lm = res.multi_face_landmarks[0].landmark
        return regions_from_mesh(np.array([(p.x, p.y) for p in lm]))

    def close(self) -> None:
        with self._lock:
            if self._mesh is not None:
                self._mesh.close()
                self._mesh = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
