# expression/models.py
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple
from pydantic import BaseModel

Point = Tuple[float, float]
Region = Tuple[Point, ...]

REGION_NAMES = (
    "left_eye", "right_eye",
    "left_eyebrow", "right_eyebrow",
    "left_pupil", "right_pupil",
    "outer_lips", "inner_lips",
)


def _as_region(points: Sequence[Sequence[float]]) -> Region:
    return tuple((float(p[0]), float(p[1])) for p in points)


@dataclass(frozen=True)
class FaceLandmarks:
    """
    Normalized 2D landmark regions for one detected face.
    Coordinates are in [0,1] with y increasing upward.
    An empty region means the detector did not provide it.
    """
    left_eye: Region = ()
    right_eye: Region = ()
    left_eyebrow: Region = ()
    right_eyebrow: Region = ()
    left_pupil: Region = ()
    right_pupil: Region = ()
    outer_lips: Region = ()
    inner_lips: Region = ()

    @classmethod
    def from_regions(cls, regions: Mapping[str, Sequence[Sequence[float]]]) -> "FaceLandmarks":
        unknown = sorted(set(regions) - set(REGION_NAMES))
        if unknown:
            raise ValueError(f"Unknown landmark regions: {', '.join(unknown)}")
        return cls(**{name: _as_region(pts) for name, pts in regions.items()})


@dataclass(frozen=True)
class Detection:
    name: str
    emoji: str
    confidence: float


@dataclass(frozen=True)
class Thresholds:
    """Empirically tuned constants; no ground-truth data backs these values."""
    # eyes
    eye_closed: float = 0.10
    eye_squint: float = 0.16
    eye_widen: float = 0.32
    eye_widen_span: float = 0.5
    # gaze
    gaze_offset: float = 0.20
    gaze_span: float = 0.4
    # brows
    brow_raise: float = 0.12
    brow_lowered: float = 0.04
    brow_furrow_gap: float = 0.06
    # mouth
    mouth_open_wide: float = 0.45
    mouth_open_wide_span: float = 0.4
    lips_parted: float = 0.12
    lips_parted_span: float = 0.2
    lip_press: float = 0.03
    upper_lip_raise: float = 0.10
    upper_lip_raise_span: float = 0.2
    lip_pucker_width: float = 0.28
    lip_pucker_span: float = 0.2
    mouth_stretch_width: float = 0.50
    mouth_stretch_span: float = 0.3
    # mouth corners
    smile: float = 0.03
    frown: float = 0.03
    corner_span: float = 0.15
    smirk_margin: float = 0.05
    smirk_neutral_factor: float = 0.6
    asymmetric_span: float = 0.2


# ---------- wire models ----------
class DetectionResponse(BaseModel):
    name: str
    emoji: str
    confidence: float


class AnalyzeResponse(BaseModel):
    timestamp_utc: str
    source: str
    face_detected: bool
    detections: List[DetectionResponse]


class LandmarksRequest(BaseModel):
    regions: Dict[str, List[List[float]]]
    source: Optional[str] = "api"


class ExpressionInfo(BaseModel):
    name: str
    emoji: str
    computable: bool
