import numpy as np
import pytest

pytest.importorskip("mediapipe")

from expression.landmarks import (
    MESH_POINTS, MESH_POINTS_WITH_IRIS, REGION_INDICES, LandmarkDetector, regions_from_mesh,
)


def _mesh(n):
    rng = np.random.default_rng(3)
    pts = rng.uniform(0.3, 0.7, size=(n, 2))
    pts[10] = (0.5, 0.2)   # forehead: top of the image
    pts[152] = (0.5, 0.9)  # chin: bottom of the image
    pts[234] = (0.1, 0.5)
    pts[454] = (0.8, 0.5)
    return pts


def test_regions_normalized_to_face_box_with_y_up():
    pts = _mesh(MESH_POINTS_WITH_IRIS)
    lm = regions_from_mesh(pts)
    for name in REGION_INDICES:
        region = getattr(lm, name)
        assert len(region) == len(REGION_INDICES[name])
        for x, y in region:
            assert 0.0 <= x <= 1.0 and 0.0 <= y <= 1.0

    expected = ((pts[468, 0] - 0.1) / 0.7, (0.9 - pts[468, 1]) / 0.7)
    assert lm.left_pupil[0] == pytest.approx(expected)
    assert len(lm.right_pupil) == 1


def test_mesh_without_iris_has_no_pupils():
    lm = regions_from_mesh(_mesh(MESH_POINTS))
    assert lm.left_pupil == () and lm.right_pupil == ()
    assert lm.outer_lips


def test_degenerate_mesh():
    assert regions_from_mesh(np.full((MESH_POINTS, 2), 0.5)) is None
    assert regions_from_mesh(np.zeros((10, 2))) is None


def test_accepts_xyz_points():
    pts = np.column_stack([_mesh(MESH_POINTS), np.zeros(MESH_POINTS)])
    assert regions_from_mesh(pts) is not None


class _Result:
    multi_face_landmarks = None


def test_detect_holds_lock_around_face_mesh():
    detector = LandmarkDetector()
    seen = []

    class FakeMesh:
        def process(self, image_rgb):
            seen.append(detector._lock.locked())
            return _Result()

        def close(self):
            seen.append("closed")

    detector._mesh = FakeMesh()
    assert detector.detect(np.zeros((4, 4, 3), dtype=np.uint8)) is None
    detector.close()
    assert seen == [True, "closed"]
    assert detector._mesh is None


def test_installed_mediapipe_ships_face_mesh():
    import mediapipe as mp
    assert hasattr(mp.solutions.face_mesh, "FaceMesh")
