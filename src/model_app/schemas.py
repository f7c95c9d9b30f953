from pydantic import BaseModel, StrictInt, TypeAdapter, confloat
from typing import List, Union

# Ints stay ints so they are echoed as sent; floats must be finite.
Feature = Union[StrictInt, confloat(strict=True, allow_inf_nan=False)]

FEATURES_ADAPTER = TypeAdapter(List[Feature])


class Prediction(BaseModel):
    input: List[Feature]
    output: int  # label in [0, num_labels)


class HealthResponse(BaseModel):
    status: str
    model_version: str
    num_labels: int
