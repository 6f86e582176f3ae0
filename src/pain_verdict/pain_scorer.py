"""Rule-based pain scoring for short texts.

Scores a single post, review or comment from the keyword lexicon:

1. Count tier hits (high/medium/low/solution-seeking) and WTP family hits
2. Weight them into a raw score and apply bonuses and penalties
3. Multiply by engagement (capped at x1.2) and recency
4. Cap low-tier-only text at 4.0 and clamp to [0, 10]

Matching is a single generic scanner over the lexicon tables: single words
match on word boundaries ("hard" never fires inside "hardly"), phrases match
by substring.
"""

from __future__ import annotations

import math
import re
import time
from collections.abc import Iterable
from functools import lru_cache

from pydantic import BaseModel, Field

from .lexicon import (
    EMOTION_KEYWORDS,
    HIGH_RELIABILITY_SOURCES,
    MEDIUM_RELIABILITY_SOURCES,
    NEGATIVE_CONTEXT_PATTERNS,
    PAIN_KEYWORDS,
    TIER_WEIGHTS,
    WTP_EXCLUSION_PATTERNS,
    WTP_FAMILY_CONFIDENCE,
    WTP_KEYWORDS,
    WTP_WEIGHT,
    PainTier,
)
from .models import (
    Emotion,
    Intensity,
    PainSignal,
    RawRecord,
    SourceReliability,
    WTPConfidence,
    clamp_score,
    round_score,
)

# Score caps for text without any high or medium pain language
LOW_ONLY_CAP = 4.0
SOLUTION_ONLY_CAP = 5.0

MAX_ENGAGEMENT_MULTIPLIER = 1.2
NEGATIVE_CONTEXT_FACTOR = 0.6
LOW_ONLY_PENALTY = 1.0
WTP_HIGH_BONUS = 1.0
PAIN_WITH_SOLUTION_BONUS = 0.5

HIGH_INTENSITY_MIN = 7.0
MEDIUM_INTENSITY_MIN = 4.0

TITLE_ONLY_PREFIX = "[Title-only analysis]"
TITLE_ONLY_WEIGHT = 0.7
TITLE_ONLY_TOKEN = "title-only"

SECONDS_PER_DAY = 86400

# (max age in days, multiplier), first match wins
RECENCY_BANDS: tuple[tuple[float, float], ...] = (
    (30, 1.5),
    (90, 1.25),
    (180, 1.0),
    (365, 0.75),
)
STALE_MULTIPLIER = 0.5

_WTP_RANK = {
    WTPConfidence.NONE: 0,
    WTPConfidence.LOW: 1,
    WTPConfidence.MEDIUM: 2,
    WTPConfidence.HIGH: 3,
}


class ScoreResult(BaseModel):
    """Per-text scoring breakdown."""

    score: float = 0.0
    intensity: Intensity = Intensity.LOW
    signals: list[str] = Field(default_factory=list)
    high_count: int = 0
    medium_count: int = 0
    low_count: int = 0
    solution_count: int = 0
    wtp_count: int = 0
    solution_seeking: bool = False
    willingness_to_pay_signal: bool = False
    wtp_confidence: WTPConfidence = WTPConfidence.NONE
    has_negative_context: bool = False
    has_wtp_exclusion: bool = False
    strongest_signal: str | None = None


@lru_cache(maxsize=4096)
def _word_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(keyword)}\b")


def match_keyword(text_lower: str, keyword: str) -> bool:
    """Check a keyword against already lower-cased text.

    Multi-word phrases match by substring; single words only on word
    boundaries.
    """
    if " " in keyword:
        return keyword in text_lower
    return _word_pattern(keyword).search(text_lower) is not None


def _matches(text_lower: str, keywords: Iterable[str]) -> list[str]:
    return [kw for kw in keywords if match_keyword(text_lower, kw)]


def has_negative_context(text: str) -> bool:
    """Hypotheticals, competitor complaints or already-resolved pain."""
    return any(p.search(text) for p in NEGATIVE_CONTEXT_PATTERNS)


def has_wtp_exclusion(text: str) -> bool:
    """Refunds, buyer's remorse, budget cuts and other non-purchase money talk."""
    return any(p.search(text) for p in WTP_EXCLUSION_PATTERNS)


def engagement_multiplier(engagement_score: float | None) -> float:
    """Log-scale boost for engagement, never above x1.2."""
    if engagement_score is None or math.isnan(engagement_score) or engagement_score <= 1:
        return 1.0
    return min(MAX_ENGAGEMENT_MULTIPLIER, 1.0 + math.log10(engagement_score) * 0.05)


def recency_multiplier(created_at: float | None, now: float | None = None) -> float:
    """Weight recent discussion higher. Unknown dates are neutral."""
    if created_at is None:
        return 1.0
    now = time.time() if now is None else now
    age_days = (now - created_at) / SECONDS_PER_DAY
    for max_age, multiplier in RECENCY_BANDS:
        if age_days <= max_age:
            return multiplier
    return STALE_MULTIPLIER


def get_intensity(score: float) -> Intensity:
    if score >= HIGH_INTENSITY_MIN:
        return Intensity.HIGH
    if score >= MEDIUM_INTENSITY_MIN:
        return Intensity.MEDIUM
    return Intensity.LOW


def _wtp_confidence(family_hits: list[WTPConfidence]) -> WTPConfidence:
    if not family_hits:
        return WTPConfidence.NONE
    best = max(family_hits, key=_WTP_RANK.__getitem__)
    # Several weaker mentions together read as one step stronger
    if best != WTPConfidence.HIGH and len(family_hits) >= 3:
        return WTPConfidence.HIGH if best == WTPConfidence.MEDIUM else WTPConfidence.MEDIUM
    if best == WTPConfidence.LOW and len(family_hits) >= 2:
        return WTPConfidence.MEDIUM
    return best


def score_text(
    text: str,
    engagement_score: float | None = 1.0,
    created_at: float | None = None,
    now: float | None = None,
) -> ScoreResult:
    """Score one text for pain.

    Never raises: empty or keyword-free text yields a zero score with no
    signals.

    Args:
        text: Raw text (title and body already joined by the caller)
        engagement_score: Normalized engagement, default 1
        created_at: Epoch seconds, enables the recency multiplier
        now: Reference time for recency, defaults to the current time

    Returns:
        ScoreResult with score, intensity, tokens and WTP/context flags
    """
    if not text or not text.strip():
        return ScoreResult()

    lower = text.lower()
    tokens: dict[str, None] = {}
    counts: dict[PainTier, int] = {}

    for tier, keywords in PAIN_KEYWORDS.items():
        hits = _matches(lower, keywords)
        counts[tier] = len(hits)
        tokens.update(dict.fromkeys(hits))

    high = counts[PainTier.HIGH]
    medium = counts[PainTier.MEDIUM]
    low = counts[PainTier.LOW]
    solution = counts[PainTier.SOLUTION_SEEKING]

    excluded = has_wtp_exclusion(lower)
    wtp_hits: list[WTPConfidence] = []
    if not excluded:
        for family, keywords in WTP_KEYWORDS.items():
            hits = _matches(lower, keywords)
            wtp_hits.extend(WTP_FAMILY_CONFIDENCE[family] for _ in hits)
            tokens.update(dict.fromkeys(hits))
    wtp_count = len(wtp_hits)
    wtp_confidence = _wtp_confidence(wtp_hits)

    negative = has_negative_context(lower)

    if not tokens:
        return ScoreResult(has_negative_context=negative, has_wtp_exclusion=excluded)

    has_pain = high > 0 or medium > 0
    only_low = not has_pain and low > 0 and solution == 0 and wtp_count == 0

    content = (
        high * TIER_WEIGHTS[PainTier.HIGH]
        + medium * TIER_WEIGHTS[PainTier.MEDIUM]
        + low * TIER_WEIGHTS[PainTier.LOW]
        + solution * TIER_WEIGHTS[PainTier.SOLUTION_SEEKING]
        + wtp_count * WTP_WEIGHT
    )
    if wtp_confidence == WTPConfidence.HIGH:
        content += WTP_HIGH_BONUS
    if high > 0 and solution > 0:
        content += PAIN_WITH_SOLUTION_BONUS
    if only_low:
        content = max(0.0, content - LOW_ONLY_PENALTY)

    score = content * engagement_multiplier(engagement_score) * recency_multiplier(created_at, now)
    if only_low:
        score = min(score, LOW_ONLY_CAP)
    elif not has_pain and solution > 0 and wtp_count == 0:
        score = min(score, SOLUTION_ONLY_CAP)

    score = clamp_score(score)
    # Penalty comes after the clamp
    if negative:
        score *= NEGATIVE_CONTEXT_FACTOR
    score = round_score(score)

    strongest = None
    for tier in (PainTier.HIGH, PainTier.MEDIUM):
        first = next((kw for kw in PAIN_KEYWORDS[tier] if kw in tokens), None)
        if first:
            strongest = first
            break

    return ScoreResult(
        score=score,
        intensity=get_intensity(score),
        signals=list(tokens),
        high_count=high,
        medium_count=medium,
        low_count=low,
        solution_count=solution,
        wtp_count=wtp_count,
        solution_seeking=solution > 0,
        willingness_to_pay_signal=wtp_count > 0,
        wtp_confidence=wtp_confidence,
        has_negative_context=negative,
        has_wtp_exclusion=excluded,
        strongest_signal=strongest,
    )


def detect_emotion(text: str) -> Emotion:
    """Pick the emotion cluster with the most substring hits.

    Ties go to the cluster listed first; no hits means neutral.
    """
    lower = (text or "").lower()
    best, best_hits = Emotion.NEUTRAL, 0
    for emotion, keywords in EMOTION_KEYWORDS.items():
        hits = sum(1 for kw in keywords if kw in lower)
        if hits > best_hits:
            best, best_hits = emotion, hits
    return best


def calculate_engagement_score(upvotes: int | None, num_comments: int | None) -> float:
    """Log-scale engagement; comments weigh more than upvotes."""
    up = max(0, upvotes or 0)
    comments = max(0, num_comments or 0)
    return math.log10(up + 1) * 2 + math.log10(comments + 1) * 3


def wtp_source_reliability(source_label: str) -> SourceReliability:
    label = (source_label or "").strip().lower()
    if label in HIGH_RELIABILITY_SOURCES:
        return SourceReliability.HIGH
    if label in MEDIUM_RELIABILITY_SOURCES:
        return SourceReliability.MEDIUM
    return SourceReliability.LOW


def build_pain_signal(record: RawRecord, now: float | None = None) -> PainSignal | None:
    """Score a record into a PainSignal, or None when it carries no signal.

    Title-only records (body starts with the title-only marker) are scored on
    the title alone and down-weighted.
    """
    title_only = record.text.startswith(TITLE_ONLY_PREFIX)
    if title_only:
        content = record.title or ""
    elif record.title:
        content = f"{record.title}\n{record.text}"
    else:
        content = record.text

    result = score_text(content, record.engagement_score, record.created_at, now)
    if result.score == 0 and not result.signals:
        return None

    score = result.score
    signals = result.signals
    if title_only:
        score = round_score(score * TITLE_ONLY_WEIGHT)
        signals = [*signals, TITLE_ONLY_TOKEN]

    return PainSignal(
        text=record.text,
        title=record.title,
        score=score,
        intensity=get_intensity(score),
        signals=signals,
        solution_seeking=result.solution_seeking,
        willingness_to_pay_signal=result.willingness_to_pay_signal,
        wtp_confidence=result.wtp_confidence,
        wtp_source_reliability=(
            wtp_source_reliability(record.source_label) if result.willingness_to_pay_signal else None
        ),
        has_negative_context=result.has_negative_context,
        has_wtp_exclusion=result.has_wtp_exclusion,
        emotion=detect_emotion(content),
        source=record,
    )


def analyze_records(records: Iterable[RawRecord], now: float | None = None) -> list[PainSignal]:
    """Score every record, drop the no-signal ones, sort by score descending."""
    signals = [s for s in (build_pain_signal(r, now) for r in records) if s is not None]
    return sorted(signals, key=lambda s: s.score, reverse=True)


def combine_signals(*groups: Iterable[PainSignal]) -> list[PainSignal]:
    """Merge signals from several sources, strongest and most engaged first."""
    merged = [s for group in groups for s in group]
    return sorted(merged, key=lambda s: (s.score, s.source.engagement_score), reverse=True)
