"""
detector.py - One review in, one ClassificationResult out.
Validation -> signal extraction -> classification. No state between calls.
"""
import logging
import unicodedata
from typing import Any

from .classifier import Classifier
from .errors import InternalError, InvalidInput, ReviewServiceError
from .features import extract_signals, tokenize
from .models import ClassificationResult

logger = logging.getLogger("Detector")


def _visible(text: str) -> str:
    # Drop control and format characters (zero-width spaces, RTL/LTR marks) but keep ordinary whitespace
    return "".join(ch for ch in text if unicodedata.category(ch)[0] != "C" or ch in "\n\r\t ")


def review_text(raw: Any) -> str:
    """Returns the trimmed review, or raises InvalidInput for missing or blank text."""
    if not isinstance(raw, str):
        raise InvalidInput()
    text = _visible(raw).strip()
    if not text:
        raise InvalidInput()
    return text


def detect_fake_review(raw: Any, classifier: Classifier, max_chars: int = 5000) -> ClassificationResult:
    text = review_text(raw)
    if max_chars > 0:
        text = text[:max_chars]

    try:
        vector = extract_signals(text)
        result = classifier.classify(vector)
    except ReviewServiceError as e:
        logger.warning(f"Classification failed ({type(e).__name__}): {e.message}")
        raise
    except Exception as e:
        logger.exception(f"Unexpected failure in {classifier.name} classifier: {e}")
        raise InternalError() from e

    logger.info(
        f"Classified review ({len(tokenize(text))} tokens) as {result.label.value} "
        f"[{classifier.name}, confidence {result.confidence}]"
    )
    return result
