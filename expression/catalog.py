# expression/catalog.py
from enum import Enum

from expression.models import Detection


class Expression(Enum):
    EYES_CLOSED = "Eyes Closed"
    LEFT_BLINK = "Left Blink"
    RIGHT_BLINK = "Right Blink"
    EYES_SQUINT = "Eyes Squint"
    LEFT_EYE_SQUINT = "Left Eye Squint"
    RIGHT_EYE_SQUINT = "Right Eye Squint"
    EYES_WIDEN = "Eyes Widen"
    GAZE_LEFT = "Gaze Left"
    GAZE_RIGHT = "Gaze Right"
    GAZE_UP = "Gaze Up"
    GAZE_DOWN = "Gaze Down"
    BOTH_BROWS_RAISED = "Both Brows Raised"
    LEFT_BROW_RAISE = "Left Brow Raise"
    RIGHT_BROW_RAISE = "Right Brow Raise"
    LEFT_BROW_LOWERED = "Left Brow Lowered"
    RIGHT_BROW_LOWERED = "Right Brow Lowered"
    BROW_FURROW = "Brow Furrow"
    MOUTH_OPEN_WIDE = "Mouth Open (Wide)"
    LIPS_PARTED = "Lips Parted"
    LIP_PRESS = "Lip Press"
    LIP_PUCKER = "Lip Pucker"
    MOUTH_STRETCH = "Mouth Stretch"
    LEFT_SMIRK = "Left Smirk"
    RIGHT_SMIRK = "Right Smirk"
    LEFT_CORNER_DOWNTURN = "Left Corner Downturn"
    RIGHT_CORNER_DOWNTURN = "Right Corner Downturn"
    SMILE = "Smile"
    FROWN = "Frown"
    UPPER_LIP_RAISE = "Upper Lip Raise"
    # Dormant: no landmark source provides nostril geometry, so no rule emits it.
    NOSTRIL_FLARE = "Nostril Flare"

    @property
    def emoji(self) -> str:
        return _EMOJI[self]

    @property
    def computable(self) -> bool:
        return self is not Expression.NOSTRIL_FLARE


_EMOJI = {
    Expression.EYES_CLOSED: "😴",
    Expression.LEFT_BLINK: "😉",
    Expression.RIGHT_BLINK: "😉",
    Expression.EYES_SQUINT: "😑",
    Expression.LEFT_EYE_SQUINT: "😒",
    Expression.RIGHT_EYE_SQUINT: "😒",
    Expression.EYES_WIDEN: "😮",
    Expression.GAZE_LEFT: "👈",
    Expression.GAZE_RIGHT: "👉",
    Expression.GAZE_UP: "👆",
    Expression.GAZE_DOWN: "👇",
    Expression.BOTH_BROWS_RAISED: "😯",
    Expression.LEFT_BROW_RAISE: "🤨",
    Expression.RIGHT_BROW_RAISE: "🤨",
    Expression.LEFT_BROW_LOWERED: "😠",
    Expression.RIGHT_BROW_LOWERED: "😠",
    Expression.BROW_FURROW: "🤔",
    Expression.MOUTH_OPEN_WIDE: "😲",
    Expression.LIPS_PARTED: "😗",
    Expression.LIP_PRESS: "😬",
    Expression.LIP_PUCKER: "😘",
    Expression.MOUTH_STRETCH: "😦",
    Expression.LEFT_SMIRK: "😏",
    Expression.RIGHT_SMIRK: "😏",
    Expression.LEFT_CORNER_DOWNTURN: "🙁",
    Expression.RIGHT_CORNER_DOWNTURN: "🙁",
    Expression.SMILE: "😁",
    Expression.FROWN: "☹️",
    Expression.UPPER_LIP_RAISE: "😤",
    Expression.NOSTRIL_FLARE: "😤",
}

COMPUTABLE = tuple(e for e in Expression if e.computable)


def detection(expr: Expression, confidence: float) -> Detection:
    return Detection(name=expr.value, emoji=expr.emoji, confidence=float(confidence))
