"""
client.py - Caller side of the classifier, used by the review-submission flow.

Turns the service's HTTP answers back into its error kinds so the caller can tell
"classified as genuine" apart from "could not classify" and decide whether to
retry or store the review unclassified.
"""
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from .config import Settings
from .errors import ClassifierUnavailable, InternalError, InvalidInput
from .models import ClassificationResult

logger = logging.getLogger("ClassifierClient")


def _error_message(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    return body.get("error") if isinstance(body, dict) else None


class ReviewClassifierClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        # CLASSIFIER_URL from the environment or .env when not given
        self.base_url = (base_url or Settings.from_env().classifier_url).rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def classify(self, review: str) -> ClassificationResult:
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                resp = client.post(f"{self.base_url}/detect-fake-review", json={"review": review})
        except httpx.HTTPError as e:
            logger.warning(f"Classifier service unreachable: {e}")
            raise ClassifierUnavailable("Classifier service is unreachable") from e

        if resp.status_code == 400:
            raise InvalidInput(_error_message(resp))
        if resp.status_code == 503:
            raise ClassifierUnavailable(_error_message(resp))
        if resp.is_error:
            logger.error(f"Classifier service failed: {resp.status_code}")
            raise InternalError(_error_message(resp))

        try:
            return ClassificationResult.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise InternalError("Classifier service sent a malformed response") from e
