"""Aggregate scored pain signals into a PainSummary."""

from __future__ import annotations

import time
from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timezone

from .config import Settings
from .lexicon import PAYMENT_INTENT_WORDS
from .models import (
    DataConfidence,
    DateRange,
    DiscussionVelocity,
    Emotion,
    Intensity,
    PainSignal,
    PainSummary,
    SourceCount,
    TemporalDistribution,
    VelocityTrend,
    WTPConfidence,
    WTPQuote,
)
from .pain_scorer import SECONDS_PER_DAY, TITLE_ONLY_TOKEN, recency_multiplier

MAX_TOP_SOURCES = 5
MAX_STRONGEST_SIGNALS = 5
MAX_WTP_QUOTES = 5
MAX_QUOTE_LENGTH = 500
UNKNOWN_SOURCE = "unknown"

# Velocity compares the last 90 days with the 90 before that
VELOCITY_WINDOW_DAYS = 90
VELOCITY_MIN_BASELINE = 5
VELOCITY_TREND_PERCENT = 15


def data_confidence(total: int, high: int, medium: int, settings: Settings | None = None) -> DataConfidence:
    """Step function of signal volume; 'high' also needs a decent intensity mix."""
    settings = settings or Settings()
    if total < settings.confidence_low_min_signals:
        return DataConfidence.VERY_LOW
    if total < settings.confidence_medium_min_signals:
        return DataConfidence.LOW
    if total >= settings.confidence_high_min_signals and (high + medium) / total >= settings.confidence_high_quality_ratio:
        return DataConfidence.HIGH
    return DataConfidence.MEDIUM


def rank_sources(signals: Sequence[PainSignal], limit: int = MAX_TOP_SOURCES) -> list[SourceCount]:
    """Count signals per source label, descending, ties in first-seen order."""
    counts = Counter(s.source.source_label or UNKNOWN_SOURCE for s in signals)
    # Counter keeps first-seen order and sorted() is stable
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [SourceCount(name=name, count=count) for name, count in ranked[:limit]]


def _strongest_signals(signals: Sequence[PainSignal]) -> list[str]:
    counts = Counter(token for s in signals for token in s.signals if token != TITLE_ONLY_TOKEN)
    return [token for token, _ in counts.most_common(MAX_STRONGEST_SIGNALS)]


def _wtp_quotes(signals: Sequence[PainSignal]) -> list[WTPQuote]:
    quotes: list[WTPQuote] = []
    for s in signals:
        if not s.willingness_to_pay_signal or s.wtp_confidence not in (WTPConfidence.HIGH, WTPConfidence.MEDIUM):
            continue
        lower = s.text.lower()
        if not any(word in lower for word in PAYMENT_INTENT_WORDS):
            continue
        quotes.append(
            WTPQuote(
                text=s.text[:MAX_QUOTE_LENGTH],
                source=s.source.source_label or UNKNOWN_SOURCE,
                url=s.source.url,
                created_at=s.source.created_at,
                upvotes=s.source.upvotes,
                num_comments=s.source.num_comments,
                rating=s.source.rating,
            )
        )
        if len(quotes) >= MAX_WTP_QUOTES:
            break
    return quotes


def _age_days(created_at: float, now: float) -> float:
    return (now - created_at) / SECONDS_PER_DAY


def _temporal_distribution(timestamps: list[float], now: float) -> TemporalDistribution:
    dist = TemporalDistribution()
    for ts in timestamps:
        age = _age_days(ts, now)
        if age <= 30:
            dist.last_30_days += 1
        elif age <= 90:
            dist.last_90_days += 1
        elif age <= 180:
            dist.last_180_days += 1
        else:
            dist.older += 1
    return dist


def _iso_date(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).date().isoformat()


def discussion_velocity(timestamps: list[float], now: float) -> DiscussionVelocity:
    """Compare discussion volume in the last 90 days against the 90 before."""
    recent = sum(1 for ts in timestamps if _age_days(ts, now) <= VELOCITY_WINDOW_DAYS)
    previous = sum(
        1 for ts in timestamps if VELOCITY_WINDOW_DAYS < _age_days(ts, now) <= 2 * VELOCITY_WINDOW_DAYS
    )

    if previous < VELOCITY_MIN_BASELINE:
        return DiscussionVelocity(recent_count=recent, previous_count=previous)

    change = round((recent - previous) / previous * 100)
    if change > VELOCITY_TREND_PERCENT:
        trend = VelocityTrend.RISING
    elif change < -VELOCITY_TREND_PERCENT:
        trend = VelocityTrend.DECLINING
    else:
        trend = VelocityTrend.STABLE

    total = recent + previous
    confidence = "high" if total >= 50 else "medium" if total >= 20 else "low"

    return DiscussionVelocity(
        percentage_change=change,
        trend=trend,
        recent_count=recent,
        previous_count=previous,
        confidence=confidence,
        insufficient_data=False,
    )


def summarize(
    signals: Sequence[PainSignal],
    now: float | None = None,
    settings: Settings | None = None,
) -> PainSummary:
    """Build a PainSummary from scored signals.

    Args:
        signals: Scored signals (may be empty)
        now: Reference epoch seconds for age buckets, defaults to now
        settings: Data-confidence bounds, defaults when omitted

    Returns:
        PainSummary with every field populated
    """
    if not signals:
        return PainSummary()

    now = time.time() if now is None else now
    total = len(signals)

    high = sum(1 for s in signals if s.intensity == Intensity.HIGH)
    medium = sum(1 for s in signals if s.intensity == Intensity.MEDIUM)
    low = total - high - medium

    emotions = {emotion: 0 for emotion in Emotion}
    for s in signals:
        emotions[s.emotion] += 1

    timestamps = [s.source.created_at for s in signals if s.source.created_at is not None]
    avg_recency = sum(recency_multiplier(s.source.created_at, now) for s in signals) / total
    recency_score = max(0.0, min(1.0, (avg_recency - 0.5) / 1.0))

    return PainSummary(
        total_signals=total,
        average_score=sum(s.score for s in signals) / total,
        high_intensity_count=high,
        medium_intensity_count=medium,
        low_intensity_count=low,
        solution_seeking_count=sum(1 for s in signals if s.solution_seeking),
        willingness_to_pay_count=sum(1 for s in signals if s.willingness_to_pay_signal),
        top_sources=rank_sources(signals),
        data_confidence=data_confidence(total, high, medium, settings),
        strongest_signals=_strongest_signals(signals),
        wtp_quotes=_wtp_quotes(signals),
        temporal_distribution=_temporal_distribution(timestamps, now),
        recency_score=round(recency_score, 2),
        emotions_breakdown=emotions,
        date_range=DateRange(oldest=_iso_date(min(timestamps)), newest=_iso_date(max(timestamps))) if timestamps else None,
        discussion_velocity=discussion_velocity(timestamps, now),
    )
