import pytest

from expression.catalog import COMPUTABLE, Expression, detection
from expression.models import FaceLandmarks


def test_catalog_size():
    assert len(Expression) == 30
    assert len(COMPUTABLE) == 29
    assert Expression.NOSTRIL_FLARE not in COMPUTABLE


def test_every_expression_has_emoji():
    for expr in Expression:
        assert expr.emoji


def test_detection_carries_name_and_emoji():
    d = detection(Expression.SMILE, 0.5)
    assert (d.name, d.emoji, d.confidence) == ("Smile", "😁", 0.5)


def test_from_regions_rejects_unknown_region():
    with pytest.raises(ValueError):
        FaceLandmarks.from_regions({"nose": [[0.5, 0.5]]})


def test_from_regions_fills_missing_regions():
    lm = FaceLandmarks.from_regions({"left_pupil": [[0.25, 0.5]]})
    assert lm.left_pupil == ((0.25, 0.5),)
    assert lm.right_eye == ()
