import pytest
from pain_verdict.aggregator import data_confidence, discussion_velocity, rank_sources, summarize
from pain_verdict.models import DataConfidence, Emotion, Intensity, PainSummary, VelocityTrend, WTPConfidence

from conftest import NOW, DAY


def test_empty_summary():
    summary = summarize([], now=NOW)
    assert summary == PainSummary()
    assert summary.total_signals == 0
    assert summary.data_confidence == DataConfidence.VERY_LOW
    assert summary.discussion_velocity.insufficient_data


def test_counts_and_mean(make_signal):
    signals = [
        make_signal(score=8.0, solution_seeking=True),
        make_signal(score=5.0, wtp=WTPConfidence.LOW),
        make_signal(score=2.0, emotion=Emotion.FRUSTRATION),
    ]
    summary = summarize(signals, now=NOW)

    assert summary.total_signals == 3
    assert summary.average_score == pytest.approx(5.0)
    assert summary.high_intensity_count == 1
    assert summary.medium_intensity_count == 1
    assert summary.low_intensity_count == 1
    assert (
        summary.high_intensity_count + summary.medium_intensity_count + summary.low_intensity_count
        == summary.total_signals
    )
    assert summary.solution_seeking_count == 1
    assert summary.willingness_to_pay_count == 1
    assert summary.emotions_breakdown[Emotion.FRUSTRATION] == 1
    assert summary.emotions_breakdown[Emotion.NEUTRAL] == 2
    assert sum(summary.emotions_breakdown.values()) == 3


def test_top_sources_ties_in_first_seen_order(make_signal):
    labels = ["a", "b", "b", "c", "a", "d"]
    signals = [make_signal(source_label=label) for label in labels]

    ranked = rank_sources(signals)
    assert [(s.name, s.count) for s in ranked] == [("a", 2), ("b", 2), ("c", 1), ("d", 1)]


def test_top_sources_capped_and_unknown(make_signal):
    signals = [make_signal(source_label=label) for label in ["", "x1", "x2", "x3", "x4", "x5", ""]]
    ranked = rank_sources(signals)
    assert len(ranked) == 5
    assert ranked[0].name == "unknown"
    assert ranked[0].count == 2


@pytest.mark.parametrize("total,high,medium,expected", [
    (0, 0, 0, DataConfidence.VERY_LOW),
    (14, 14, 0, DataConfidence.VERY_LOW),
    (15, 0, 0, DataConfidence.LOW),
    (49, 49, 0, DataConfidence.LOW),
    (50, 0, 0, DataConfidence.MEDIUM),
    (100, 10, 10, DataConfidence.MEDIUM),
    (100, 10, 20, DataConfidence.HIGH),
])
def test_data_confidence(settings, total, high, medium, expected):
    assert data_confidence(total, high, medium, settings) == expected


def test_data_confidence_monotone_in_volume(settings):
    order = [DataConfidence.VERY_LOW, DataConfidence.LOW, DataConfidence.MEDIUM, DataConfidence.HIGH]
    levels = [order.index(data_confidence(n, n // 2, n // 4, settings)) for n in range(1, 250)]
    assert levels == sorted(levels)


def test_temporal_buckets_and_date_range(make_signal):
    ages = [1, 30, 31, 90, 91, 180, 181, 400]
    signals = [make_signal(created_at=NOW - age * DAY) for age in ages]
    signals.append(make_signal(created_at=None))
    summary = summarize(signals, now=NOW)

    dist = summary.temporal_distribution
    assert (dist.last_30_days, dist.last_90_days, dist.last_180_days, dist.older) == (2, 2, 2, 2)
    assert summary.date_range is not None
    assert summary.date_range.oldest < summary.date_range.newest
    assert len(summary.date_range.newest) == 10


def test_no_timestamps_no_date_range(make_signal):
    summary = summarize([make_signal(), make_signal()], now=NOW)
    assert summary.date_range is None
    assert summary.recency_score == pytest.approx(0.5)


def test_recency_score_bounds(make_signal):
    fresh = summarize([make_signal(created_at=NOW - DAY)] * 3, now=NOW)
    stale = summarize([make_signal(created_at=NOW - 1000 * DAY)] * 3, now=NOW)
    assert fresh.recency_score == pytest.approx(1.0)
    assert stale.recency_score == pytest.approx(0.0)


def test_strongest_signals_most_common_first(make_signal):
    signals = [
        make_signal(signals=["frustrated", "nightmare"]),
        make_signal(signals=["frustrated", "title-only"]),
        make_signal(signals=["frustrated", "struggling"]),
        make_signal(signals=["nightmare"]),
    ]
    summary = summarize(signals, now=NOW)
    assert summary.strongest_signals[:2] == ["frustrated", "nightmare"]
    assert "title-only" not in summary.strongest_signals


def test_wtp_quotes_need_payment_language(make_signal):
    long_text = "I would pay for this " + "x" * 600
    signals = [
        make_signal(long_text, wtp=WTPConfidence.HIGH),
        make_signal("Saves time every single day", wtp=WTPConfidence.MEDIUM),
        make_signal("I'd pay for it, maybe", wtp=WTPConfidence.LOW),
        make_signal("Take my money, shut up and pay", wtp=WTPConfidence.HIGH, source_label=""),
    ]
    summary = summarize(signals, now=NOW)

    assert len(summary.wtp_quotes) == 2
    assert len(summary.wtp_quotes[0].text) == 500
    assert summary.wtp_quotes[1].source == "unknown"


def test_velocity_insufficient_baseline():
    timestamps = [NOW - 10 * DAY] * 20 + [NOW - 120 * DAY] * 4
    velocity = discussion_velocity(timestamps, NOW)
    assert velocity.insufficient_data
    assert velocity.trend == VelocityTrend.INSUFFICIENT_DATA
    assert velocity.percentage_change is None
    assert velocity.recent_count == 20
    assert velocity.previous_count == 4


def test_velocity_rising_and_stable():
    rising = discussion_velocity([NOW - 10 * DAY] * 20 + [NOW - 120 * DAY] * 10, NOW)
    assert rising.trend == VelocityTrend.RISING
    assert rising.percentage_change == 100
    assert rising.confidence == "medium"
    assert not rising.insufficient_data

    stable = discussion_velocity([NOW - 10 * DAY] * 11 + [NOW - 120 * DAY] * 10, NOW)
    assert stable.trend == VelocityTrend.STABLE
    assert stable.confidence == "medium"

    declining = discussion_velocity([NOW - 10 * DAY] * 2 + [NOW - 120 * DAY] * 10, NOW)
    assert declining.trend == VelocityTrend.DECLINING
    assert declining.confidence == "low"


def test_summarize_does_not_mutate(make_signal):
    signals = [make_signal(score=7.5, intensity=Intensity.HIGH), make_signal(score=1.0)]
    snapshot = [s.model_copy() for s in signals]
    summarize(signals, now=NOW)
    assert signals == snapshot
