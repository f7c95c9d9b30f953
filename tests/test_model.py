import time

import pytest

from model_app.config import Settings
from model_app.model import RandomLabelModel
from model_app.training import train_model


def test_predict_returns_label_in_range():
    model = RandomLabelModel()
    for _ in range(100):
        label = model.predict([1.0, 2.0])
        assert isinstance(label, int)
        assert label in model.labels


def test_predict_ignores_features():
    model = RandomLabelModel(num_labels=4, seed=3)
    other = RandomLabelModel(num_labels=4, seed=3)

    assert [model.predict([]) for _ in range(10)] == [
        other.predict([9.9] * 50) for _ in range(10)
    ]


def test_seed_makes_sequence_reproducible():
    a = RandomLabelModel(seed=42)
    b = RandomLabelModel(seed=42)

    assert [a.predict([0.0]) for _ in range(50)] == [b.predict([0.0]) for _ in range(50)]


def test_unseeded_rapid_calls_cover_range():
    model = RandomLabelModel()
    seen = {model.predict([0.0]) for _ in range(300)}
    assert seen == {0, 1, 2}


@pytest.mark.parametrize("num_labels", [0, -1])
def test_rejects_empty_label_range(num_labels):
    with pytest.raises(ValueError):
        RandomLabelModel(num_labels=num_labels)


def test_train_model_waits_then_returns_model():
    settings = Settings(training_delay_seconds=0.05, num_labels=5, seed=1)

    start = time.perf_counter()
    model = train_model(settings)

    assert time.perf_counter() - start >= 0.05
    assert model.num_labels == 5
    assert model.seed == 1
