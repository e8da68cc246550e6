# expression/config.py
import logging
import math
import os
from dataclasses import fields, replace
from typing import Optional

import yaml

from expression.models import Thresholds

logger = logging.getLogger(__name__)

THRESHOLDS_PATH = os.getenv("EXPRESSION_THRESHOLDS", "config.yaml")
MIN_DETECTION_CONFIDENCE = float(os.getenv("MIN_DETECTION_CONFIDENCE", "0.5"))
ANALYSIS_INTERVAL_SEC = float(os.getenv("ANALYSIS_INTERVAL_SEC", "0.1"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CAMERA_INDEX = int(os.getenv("CAMERA_INDEX", "0"))

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)


def load_thresholds(path: Optional[str] = None) -> Thresholds:
    """
    Read threshold overrides from the `thresholds:` mapping of a YAML file.
    A missing file gives the built-in defaults.
    """
    path = path or THRESHOLDS_PATH
    if not os.path.exists(path):
        return Thresholds()
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")

    overrides = data.get("thresholds") or {}
    if not isinstance(overrides, dict):
        raise ValueError(f"{path}: 'thresholds' must be a mapping")
    known = {f.name for f in fields(Thresholds)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"{path}: unknown thresholds {', '.join(unknown)}")

    values = {}
    for key, raw in overrides.items():
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise ValueError(f"{path}: threshold {key} must be a number, got {raw!r}")
        # every threshold is used as a divisor or a positive margin
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"{path}: threshold {key} must be a finite number > 0, got {raw!r}")
        values[key] = value

    logger.info(f"Loaded {len(values)} threshold override(s) from {path}")
    return replace(Thresholds(), **values)
