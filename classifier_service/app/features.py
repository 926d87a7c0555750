"""
features.py - Turns review text into a SignalVector.

Pure measurement, no decisions and no I/O. Every signal is a per-token rate or a
ratio clipped to [0, 1] so a one-line review and a long essay land on the same scale.
"""
import math
import re

from .models import SignalVector

# Unicode words, apostrophes kept inside ("don't"), underscores dropped
TOKEN_RE = re.compile(r"[^\W_]+(?:'[^\W_]+)*")
SHOUT_RE = re.compile(r"[!?]{2,}")

# ── LEXICONS ───────────────────────────────────────────────────────────────
PROMO_PATTERNS = [
    r"\b(buy now|click here|order now|shop now|limited time|act now)\b",
    r"\b(discount|promo code|coupon|affiliate|sponsored|giveaway)\b",
    r"\bclick\b",
    r"https?://\S+",
    r"\bwww\.\S+",
    r"\b(dm me|contact me at|visit my)\b",
]
PROMO_RE = re.compile("|".join(PROMO_PATTERNS), re.IGNORECASE)

EXTREME_WORDS = frozenset({
    "amazing", "best", "ever", "perfect", "incredible", "awesome", "fantastic",
    "unbelievable", "greatest", "outstanding", "phenomenal", "flawless",
    "miracle", "mindblowing", "superb", "wow",
    "worst", "terrible", "horrible", "awful", "disgusting", "garbage", "scam",
    "must", "absolutely", "totally", "insane",
})

FIRST_PERSON = frozenset({"i", "me", "my", "mine", "i'm", "i've", "i'd", "we", "our", "us"})

# Reviews past this many tokens all count as "long"
LENGTH_SATURATION = 200


def tokenize(text: str) -> list[str]:
    return TOKEN_RE.findall(text)


def _clip(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


def _repetition_rate(lowered: list[str]) -> float:
    """Share of adjacent token pairs that repeat the same word ("CLICK CLICK")."""
    if len(lowered) < 2:
        return 0.0
    repeats = sum(1 for a, b in zip(lowered, lowered[1:]) if a == b)
    return repeats / (len(lowered) - 1)


def _uppercase_ratio(tokens: list[str]) -> float:
    # Single letters ("I", "A") say nothing about shouting
    wordlike = [t for t in tokens if len(t) >= 2 and any(c.isalpha() for c in t)]
    if not wordlike:
        return 0.0
    return sum(1 for t in wordlike if t.isupper()) / len(wordlike)


def extract_signals(text: str) -> SignalVector:
    """
    Measures a review. Total over any string: text with no word tokens at all
    still yields a full vector (mostly zeros).
    """
    tokens = tokenize(text)
    lowered = [t.lower() for t in tokens]
    n = len(tokens)
    per_token = max(n, 1)

    # "!!!" is one exclamation plus two characters of excess
    excess = sum(len(run) - 1 for run in SHOUT_RE.findall(text))

    return SignalVector(
        length_score=_clip(math.log1p(n) / math.log1p(LENGTH_SATURATION)),
        lexical_diversity=_clip(len(set(lowered)) / n) if n else 0.0,
        exclamation_rate=_clip(text.count("!") / per_token),
        punctuation_excess=_clip(excess / per_token),
        uppercase_ratio=_clip(_uppercase_ratio(tokens)),
        extremity_rate=_clip(sum(1 for t in lowered if t in EXTREME_WORDS) / per_token),
        promo_rate=_clip(len(PROMO_RE.findall(text)) / per_token),
        repetition_rate=_clip(_repetition_rate(lowered)),
        first_person_rate=_clip(sum(1 for t in lowered if t in FIRST_PERSON) / per_token),
    )
