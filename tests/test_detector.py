"""Tests for the single-review detection pipeline."""

import pytest

from classifier_service.app.classifier import HeuristicClassifier, UnavailableClassifier
from classifier_service.app.detector import detect_fake_review, review_text
from classifier_service.app.errors import ClassifierUnavailable, InternalError, InvalidInput
from classifier_service.app.models import ClassificationResult, Label


class RecordingClassifier:
    name = "recording"

    def __init__(self):
        self.vectors = []

    def classify(self, vector):
        self.vectors.append(vector)
        return ClassificationResult(label=Label.GENUINE, confidence=0.6)


class ExplodingClassifier:
    name = "exploding"

    def classify(self, vector):
        raise RuntimeError("secret stack detail")


class TestReviewText:
    """Tests for review validation."""

    @pytest.mark.parametrize("raw", [None, "", "   ", "\n\t", 42, ["review"]])
    def test_rejects_missing_or_blank(self, raw):
        """Test that blank and non-string reviews raise InvalidInput."""
        with pytest.raises(InvalidInput):
            review_text(raw)

    def test_trims(self):
        """Test that surrounding whitespace is removed."""
        assert review_text("  fine kettle \n") == "fine kettle"

    @pytest.mark.parametrize("raw", ["\u200b", " \u200b\u200e ", "\ufeff\u2060"])
    def test_rejects_invisible_only(self, raw):
        """Test that zero-width and direction marks alone count as blank."""
        with pytest.raises(InvalidInput):
            review_text(raw)

    def test_strips_invisible_characters(self):
        """Test that invisible characters inside a real review are removed."""
        assert review_text("fine\u200b kettle") == "fine kettle"

    def test_punctuation_only_is_accepted(self):
        """Test that visible punctuation is still a review to measure."""
        assert review_text("!!!") == "!!!"


class TestDetectFakeReview:
    """Tests for detect_fake_review."""

    def test_empty_review_never_classifies(self):
        """Test that empty input raises before the classifier is called."""
        clf = RecordingClassifier()
        with pytest.raises(InvalidInput):
            detect_fake_review("", clf)
        assert clf.vectors == []

    def test_one_classification_per_call(self):
        """Test that a valid review is classified exactly once."""
        clf = RecordingClassifier()
        result = detect_fake_review("Works as expected.", clf)
        assert result.label == Label.GENUINE
        assert len(clf.vectors) == 1

    def test_long_review_is_truncated(self):
        """Test that text beyond max_chars does not reach the extractor."""
        clf = RecordingClassifier()
        detect_fake_review("calm words " * 10 + "!!!!!!!!!!", clf, max_chars=50)
        assert clf.vectors[0].exclamation_rate == 0.0

    def test_unavailable_propagates(self):
        """Test that an unavailable classifier is reported, not replaced by a default."""
        with pytest.raises(ClassifierUnavailable):
            detect_fake_review("Nice lamp", UnavailableClassifier())

    def test_unexpected_failure_becomes_internal_error(self):
        """Test that unexpected faults are wrapped without leaking their text."""
        with pytest.raises(InternalError) as exc_info:
            detect_fake_review("Nice lamp", ExplodingClassifier())
        assert "secret" not in exc_info.value.message

    def test_scenarios(self):
        """Test both reference reviews against the default scorer."""
        clf = HeuristicClassifier()
        genuine = detect_fake_review("Great product, fast shipping, exactly as described!", clf)
        fake = detect_fake_review("BUY NOW!!! AMAZING BEST EVER!!! CLICK CLICK CLICK", clf)
        assert (genuine.label, fake.label) == (Label.GENUINE, Label.FAKE)
        assert genuine.confidence > 0.5
        assert fake.confidence > 0.5
