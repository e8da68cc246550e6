from expression.catalog import Expression, detection
from expression.stream import ExpressionStream

SMILE = [detection(Expression.SMILE, 0.5)]


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_min_interval_between_analyses():
    clock = FakeClock()
    calls = []
    stream = ExpressionStream(lambda f: calls.append(f) or SMILE, min_interval=0.1, clock=clock)

    assert stream.offer("f1") == SMILE
    clock.now = 0.05
    assert stream.offer("f2") is None
    clock.now = 0.15
    assert stream.offer("f3") == SMILE
    assert calls == ["f1", "f3"]
    assert stream.latest == SMILE


def test_one_analysis_in_flight():
    clock = FakeClock()
    nested = []

    def analyze(frame):
        clock.now += 1.0
        nested.append(stream.offer("during"))
        assert stream.is_analyzing
        return SMILE

    stream = ExpressionStream(analyze, min_interval=0.0, clock=clock)
    assert stream.offer("first") == SMILE
    assert nested == [None]
    assert not stream.is_analyzing


def test_failed_analysis_clears_latest():
    clock = FakeClock()
    def analyze(frame):
        if frame == "boom":
            raise RuntimeError("detector crashed")
        return SMILE

    stream = ExpressionStream(analyze, min_interval=0.1, clock=clock)
    stream.offer("ok")
    clock.now = 1.0
    assert stream.offer("boom") == []
    assert stream.latest == []


def test_reset():
    stream = ExpressionStream(lambda f: SMILE, min_interval=10.0, clock=FakeClock())
    stream.offer("a")
    stream.reset()
    assert stream.latest == []
    assert stream.offer("b") == SMILE
