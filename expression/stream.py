# expression/stream.py
import logging
import threading
import time
from typing import Any, Callable, List, Optional

from expression.models import Detection

logger = logging.getLogger(__name__)


class ExpressionStream:
    """
    Caller-side throttle for one video stream:
      - at most one analysis in flight
      - at least `min_interval` seconds between started analyses
      - keeps the latest result for display
    Frames offered while busy or too early are dropped.
    """

    def __init__(self, analyze: Callable[[Any], List[Detection]],
                 min_interval: float = 0.1,
                 clock: Callable[[], float] = time.monotonic):
        self._analyze = analyze
        self.min_interval = float(min_interval)
        self._clock = clock
        self._busy = threading.Lock()
        self._state = threading.Lock()
        self._last_start: Optional[float] = None
        self._latest: List[Detection] = []

    @property
    def latest(self) -> List[Detection]:
        with self._state:
            return list(self._latest)

    @property
    def is_analyzing(self) -> bool:
        return self._busy.locked()

    def reset(self) -> None:
        with self._state:
            self._latest = []
            self._last_start = None

    def offer(self, frame: Any) -> Optional[List[Detection]]:
        """Analyze `frame` if the policy allows it; return None when the frame is dropped."""
        if not self._busy.acquire(blocking=False):
            return None
        try:
            now = self._clock()
            with self._state:
                if self._last_start is not None and now - self._last_start < self.min_interval:
                    return None
                self._last_start = now
            try:
                result = list(self._analyze(frame))
            except Exception:
                logger.exception("Frame analysis failed")
                result = []
            with self._state:
                self._latest = result
            return result
        finally:
            self._busy.release()
