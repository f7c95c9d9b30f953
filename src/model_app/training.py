import time

from loguru import logger

from .config import Settings
from .model import RandomLabelModel


def train_model(settings: Settings) -> RandomLabelModel:
    """Simulated training: block for the configured delay, then hand back the model."""
    logger.info("Model is being trained...")
    start = time.perf_counter()
    time.sleep(settings.training_delay_seconds)
    model = RandomLabelModel(num_labels=settings.num_labels, seed=settings.seed)
    logger.bind(
        num_labels=model.num_labels,
        seeded=settings.seed is not None,
        train_time_sec=round(time.perf_counter() - start, 3),
    ).info("Model trained and ready!")
    return model
