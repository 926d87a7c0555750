from enum import Enum
from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class Label(str, Enum):
    FAKE = "fake"
    GENUINE = "genuine"


class SignalVector(BaseModel):
    """Per-review measurements. Every value is a rate or ratio in [0, 1]."""
    model_config = ConfigDict(frozen=True)

    length_score: float
    lexical_diversity: float
    exclamation_rate: float
    punctuation_excess: float
    uppercase_ratio: float
    extremity_rate: float
    promo_rate: float
    repetition_rate: float
    first_person_rate: float

    def as_array(self) -> np.ndarray:
        return np.array([getattr(self, name) for name in FEATURE_NAMES], dtype=float)


# Column order for model input
FEATURE_NAMES: tuple[str, ...] = tuple(SignalVector.model_fields)


class ClassificationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: Label
    confidence: float = Field(ge=0.0, le=1.0)   # classifier's own certainty


class DetectRequest(BaseModel):
    review: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
