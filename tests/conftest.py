import pytest

from hotcaseai.inference.cache import ModelCache
from hotcaseai.inference.predictor import ShapeClassifier
from hotcaseai.schemas import TrainingOptions
from hotcaseai.storage import MemoryStore

ORDER_SAMPLES = [
    "order 2024 alpha",
    "order 2025 beta",
    "order 2026 gamma",
    "order 2027 delta",
]


class FakeClock:
    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def cache(clock):
    return ModelCache(clock=clock)


@pytest.fixture
def fast_options():
    return TrainingOptions(epochs=5, seed=7)


@pytest.fixture
def trained(store, cache, fast_options):
    classifier = ShapeClassifier("orders", store=store, cache=cache)
    classifier.train(ORDER_SAMPLES, fast_options)
    return classifier
