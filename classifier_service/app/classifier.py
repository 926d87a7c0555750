"""
Review authenticity classifiers.

Every variant maps a SignalVector to a ClassificationResult:
1. HeuristicClassifier  -> weighted signal score, local CPU (default)
2. ModelClassifier      -> scikit-learn model loaded once from a joblib file
3. RemoteClassifier     -> external inference backend over HTTP
4. UnavailableClassifier -> no model wired in; always refuses

A variant that cannot produce a judgment raises ClassifierUnavailable.
None of them fall back to a fixed "genuine" answer.
"""
import logging
import math
from pathlib import Path
from typing import Any, Optional, Protocol

import httpx
import joblib

from .config import Settings
from .errors import ClassifierUnavailable
from .models import FEATURE_NAMES, ClassificationResult, Label, SignalVector

logger = logging.getLogger("Classifier")

# ── HEURISTIC WEIGHTS ──────────────────────────────────────────────────────
# Positive pushes towards "fake", negative towards "genuine"
DEFAULT_WEIGHTS: dict[str, float] = {
    "length_score": -0.5,
    "lexical_diversity": -1.0,
    "exclamation_rate": 3.0,
    "punctuation_excess": 3.0,
    "uppercase_ratio": 3.0,
    "extremity_rate": 6.0,
    "promo_rate": 6.0,
    "repetition_rate": 4.0,
    "first_person_rate": -1.5,
}
DEFAULT_BIAS = -1.0


class Classifier(Protocol):
    name: str

    def classify(self, vector: SignalVector) -> ClassificationResult:
        ...


def _sigmoid(z: float) -> float:
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    e = math.exp(z)
    return e / (1.0 + e)


def result_from_probability(p_fake: float) -> ClassificationResult:
    """
    Confidence is max(p, 1 - p): 0.5 on the decision boundary, rising with
    distance from it. Exactly 0.5 reports "genuine".
    """
    p_fake = min(max(float(p_fake), 0.0), 1.0)
    label = Label.FAKE if p_fake > 0.5 else Label.GENUINE
    return ClassificationResult(label=label, confidence=round(max(p_fake, 1.0 - p_fake), 4))


class HeuristicClassifier:
    name = "heuristic"

    def __init__(self, weights: Optional[dict[str, float]] = None, bias: float = DEFAULT_BIAS):
        weights = dict(DEFAULT_WEIGHTS if weights is None else weights)
        unknown = set(weights) - set(FEATURE_NAMES)
        if unknown:
            raise ValueError(f"Unknown signals in weights: {sorted(unknown)}")
        self.weights = weights
        self.bias = bias

    def score(self, vector: SignalVector) -> float:
        """Signed distance from the decision boundary (logit of p_fake)."""
        return self.bias + sum(w * getattr(vector, name) for name, w in self.weights.items())

    def classify(self, vector: SignalVector) -> ClassificationResult:
        return result_from_probability(_sigmoid(self.score(vector)))


class ModelClassifier:
    """Wraps a fitted estimator with predict_proba and a "fake" class."""
    name = "model"

    def __init__(self, estimator: Any):
        classes = [str(c) for c in getattr(estimator, "classes_", [])]
        if Label.FAKE.value not in classes:
            raise ValueError(f"Model classes {classes} do not include '{Label.FAKE.value}'")
        self.estimator = estimator
        self._fake_index = classes.index(Label.FAKE.value)

    @classmethod
    def load(cls, path: str | Path) -> "ModelClassifier":
        estimator = joblib.load(path)
        logger.info(f"Loaded review model from {path}")
        return cls(estimator)

    def classify(self, vector: SignalVector) -> ClassificationResult:
        try:
            proba = self.estimator.predict_proba(vector.as_array().reshape(1, -1))[0]
            p_fake = float(proba[self._fake_index])
        except Exception as e:
            logger.error(f"Model prediction failed: {e}")
            raise ClassifierUnavailable("Review model failed to produce a prediction") from e
        if math.isnan(p_fake):
            raise ClassifierUnavailable("Review model returned no probability")
        return result_from_probability(p_fake)


class RemoteClassifier:
    """
    Delegates to an inference backend. Request: {"features": {...}}.
    Response: {"is_fake": bool, "confidence_score": number in [0.5, 1]}.
    """
    name = "remote"

    def __init__(self, url: str, timeout: float = 10.0, transport: Optional[httpx.BaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def classify(self, vector: SignalVector) -> ClassificationResult:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.post(self.url, json={"features": vector.model_dump()})
                resp.raise_for_status()
                body = resp.json()
        except httpx.TimeoutException as e:
            logger.warning(f"Inference backend timed out after {self.timeout}s")
            raise ClassifierUnavailable("Inference backend timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"Inference backend error: {e.response.status_code} {e.response.text[:200]}")
            raise ClassifierUnavailable("Inference backend returned an error") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Inference backend unreachable or malformed reply: {e}")
            raise ClassifierUnavailable("Inference backend is unreachable") from e

        return self._parse(body)

    @staticmethod
    def _parse(body: Any) -> ClassificationResult:
        if not isinstance(body, dict):
            raise ClassifierUnavailable("Inference backend sent a malformed response")
        is_fake = body.get("is_fake")
        confidence = body.get("confidence_score")
        if not isinstance(is_fake, bool) or isinstance(confidence, bool) \
                or not isinstance(confidence, (int, float)):
            raise ClassifierUnavailable("Inference backend sent a malformed response")
        if not 0.0 <= confidence <= 1.0:
            raise ClassifierUnavailable("Inference backend sent a confidence outside [0, 1]")
        # Confidence is certainty in the returned label, never below a coin flip
        if confidence < 0.5:
            raise ClassifierUnavailable("Inference backend sent a confidence below 0.5 for its own label")
        label = Label.FAKE if is_fake else Label.GENUINE
        return ClassificationResult(label=label, confidence=round(float(confidence), 4))


class UnavailableClassifier:
    name = "unavailable"

    def __init__(self, reason: str = "No review classifier is configured"):
        self.reason = reason

    def classify(self, vector: SignalVector) -> ClassificationResult:
        raise ClassifierUnavailable(self.reason)


def build_classifier(settings: Settings) -> Classifier:
    backend = settings.classifier_backend

    if backend == "heuristic":
        return HeuristicClassifier()

    if backend == "model":
        try:
            return ModelClassifier.load(settings.model_path)
        except Exception as e:
            logger.error(f"Could not load review model from {settings.model_path}: {e}")
            return UnavailableClassifier(f"Review model could not be loaded from {settings.model_path}")

    if backend == "remote":
        if not settings.inference_url:
            logger.error("CLASSIFIER_BACKEND=remote but INFERENCE_URL is empty")
            return UnavailableClassifier("Inference backend URL is not configured")
        return RemoteClassifier(settings.inference_url, timeout=settings.inference_timeout)

    if backend != "none":
        logger.error(f"Unknown CLASSIFIER_BACKEND '{backend}'")
    return UnavailableClassifier()
