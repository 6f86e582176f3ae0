"""Combine research dimensions into one viability verdict.

Four dimensions, each scored 0-10 by its own analysis:

| Dimension   | Weight |
|-------------|--------|
| Pain        | 0.35   |
| Market      | 0.25   |
| Competition | 0.25   |
| Timing      | 0.15   |

Missing dimensions are skipped and the remaining weights renormalize to 1.0.
The verdict comes from the unrounded weighted score; every reported score is
rounded half-up to one decimal.

Alongside the single score, a dual-axis breakdown separates "does the evidence
match this hypothesis" from "is there a market at all".
"""

from __future__ import annotations

import math

from .models import (
    CompetitionScoreInput,
    Confidence,
    DataConfidence,
    DataSufficiency,
    DimensionScore,
    DimensionStatus,
    HypothesisConfidence,
    HypothesisEvidence,
    HypothesisFactors,
    HypothesisLevel,
    MarketMaturity,
    MarketOpportunity,
    MarketOpportunityFactors,
    MarketOpportunityLevel,
    MarketScoreInput,
    PainScoreInput,
    RedFlag,
    RedFlagSeverity,
    SampleSize,
    SampleSizeLabel,
    ScoreRange,
    TimingScoreInput,
    VerdictLevel,
    ViabilityVerdict,
    clamp_score,
    round_score,
)

PAIN = "Pain"
MARKET = "Market"
COMPETITION = "Competition"
TIMING = "Timing"

# Declaration order doubles as the tie-break for the weakest dimension
FULL_WEIGHTS: dict[str, float] = {
    PAIN: 0.35,
    MARKET: 0.25,
    COMPETITION: 0.25,
    TIMING: 0.15,
}
DIMENSION_ORDER = tuple(FULL_WEIGHTS)

# Inclusive lower bounds, highest first
VERDICT_THRESHOLDS: tuple[tuple[VerdictLevel, float], ...] = (
    (VerdictLevel.STRONG, 7.5),
    (VerdictLevel.MIXED, 5.0),
    (VerdictLevel.WEAK, 2.5),
)
DEALBREAKER_THRESHOLD = 3.0
MAX_RECOMMENDATIONS = 5

STATUS_THRESHOLDS: tuple[tuple[DimensionStatus, float], ...] = (
    (DimensionStatus.STRONG, 7.5),
    (DimensionStatus.ADEQUATE, 5.0),
    (DimensionStatus.NEEDS_WORK, 3.0),
)

VERDICT_LABELS: dict[VerdictLevel, str] = {
    VerdictLevel.STRONG: "STRONG SIGNAL",
    VerdictLevel.MIXED: "MIXED SIGNAL",
    VerdictLevel.WEAK: "WEAK SIGNAL",
    VerdictLevel.NONE: "DO NOT PURSUE",
}
LIMITED_DATA_LABELS: dict[VerdictLevel, str] = {
    VerdictLevel.STRONG: "PROMISING - LIMITED DATA",
    VerdictLevel.MIXED: "UNCERTAIN - LIMITED DATA",
    VerdictLevel.WEAK: "WEAK - LIMITED DATA",
    VerdictLevel.NONE: "DO NOT PURSUE",
}
VERDICT_DESCRIPTIONS: dict[VerdictLevel, str] = {
    VerdictLevel.STRONG: "Strong evidence across dimensions. Worth building a prototype and testing with real users.",
    VerdictLevel.MIXED: "Some promising signals but notable gaps. Address the weakest dimension before committing.",
    VerdictLevel.WEAK: "Limited evidence of a viable opportunity. Consider pivoting the hypothesis or target audience.",
    VerdictLevel.NONE: "Insufficient evidence to pursue this idea as currently framed.",
}
NO_DATA_LABEL = "NO DATA"
NO_DATA_DESCRIPTION = "Run at least one analysis to get a verdict."

DEALBREAKER_MESSAGES: dict[str, str] = {
    PAIN: "Pain Score is critically low - users may not have strong enough pain points",
    MARKET: "Market Score is critically low - the market may be too small or the required penetration unrealistic",
    COMPETITION: "Competition Score is critically low - the market may be oversaturated",
    TIMING: "Timing Score is critically low - market timing may be unfavorable",
}

MISSING_DIMENSION_RECOMMENDATIONS: dict[str, str] = {
    PAIN: "Run Community Voice analysis to measure how painful the problem is",
    MARKET: "Run Market Sizing analysis to estimate the addressable market",
    COMPETITION: "Run Competitor Intelligence analysis to map existing solutions",
    TIMING: "Run Timing Analysis to check whether the market is ready now",
}
WTP_RECOMMENDATION = "Find evidence of willingness-to-pay: look for pricing discussions or people paying for workarounds"
INTERVIEW_RECOMMENDATION = "Conduct 5-10 user interviews to validate the findings directly with the target audience"

IMPROVEMENT_RECOMMENDATIONS: dict[str, str] = {
    PAIN: "Look for stronger pain: narrow the target audience or sharpen the problem statement",
    MARKET: "Revisit market sizing assumptions or target a larger customer segment",
    COMPETITION: "Identify an underserved niche or a clear differentiator against existing competitors",
    TIMING: "Validate timing: look for recent tailwinds such as regulation, platform shifts or new technology",
}

# Sample size bands on posts analyzed: (min posts, label, score range half-width)
SAMPLE_SIZE_BANDS: tuple[tuple[int, SampleSizeLabel, float | None], ...] = (
    (100, SampleSizeLabel.HIGH_CONFIDENCE, None),
    (50, SampleSizeLabel.MODERATE_CONFIDENCE, None),
    (20, SampleSizeLabel.LOW_CONFIDENCE, 1.5),
    (0, SampleSizeLabel.VERY_LIMITED, 2.0),
)
SATURATED_COMPETITOR_COUNT = 10

HYPOTHESIS_WEIGHTS = {"direct": 0.5, "volume": 0.3, "multi_source": 0.2}
MARKET_OPPORTUNITY_WEIGHTS = {"market_size": 0.4, "timing": 0.3, "activity": 0.3}

ScoreInput = PainScoreInput | MarketScoreInput | CompetitionScoreInput | TimingScoreInput


def verdict_for_score(score: float) -> VerdictLevel:
    """Map an overall score to a verdict tier; boundary values go to the higher tier."""
    for level, threshold in VERDICT_THRESHOLDS:
        if score >= threshold:
            return level
    return VerdictLevel.NONE


def dimension_status(score: float) -> DimensionStatus:
    for status, threshold in STATUS_THRESHOLDS:
        if score >= threshold:
            return status
    return DimensionStatus.CRITICAL


def normalize_weights(names: list[str]) -> dict[str, float]:
    """Renormalize the full weights over the present dimensions."""
    total = sum(FULL_WEIGHTS[n] for n in names)
    if total <= 0:
        return {}
    return {n: FULL_WEIGHTS[n] / total for n in names}


def to_confidence(value: DataConfidence | Confidence | str) -> Confidence:
    """Collapse the four-level data confidence onto three levels."""
    raw = value.value if hasattr(value, "value") else str(value)
    if raw in ("very_low", "low"):
        return Confidence.LOW
    if raw == "high":
        return Confidence.HIGH
    return Confidence.MEDIUM


def aggregate_confidence(confidences: list[Confidence]) -> Confidence:
    """High only if all are high, low only if all are low, otherwise medium."""
    if not confidences:
        return Confidence.LOW
    if all(c == Confidence.HIGH for c in confidences):
        return Confidence.HIGH
    if all(c == Confidence.LOW for c in confidences):
        return Confidence.LOW
    return Confidence.MEDIUM


def _pain_summary(pain: PainScoreInput) -> str:
    text = f"{pain.total_signals} pain signals, {pain.willingness_to_pay_count} with willingness to pay"
    if pain.posts_analyzed is not None:
        text += f" ({pain.posts_analyzed} posts analyzed)"
    return text


def _market_summary(market: MarketScoreInput) -> str:
    parts = [f"Market score {round_score(market.score)}/10"]
    if market.penetration_required is not None:
        parts.append(f"needs {market.penetration_required:g}% penetration")
    if market.achievability is not None:
        parts.append(market.achievability.value.replace("_", " "))
    return ", ".join(parts)


def _competition_summary(competition: CompetitionScoreInput) -> str:
    text = f"{competition.competitor_count} competitors"
    if competition.has_free_alternatives:
        text += ", free alternatives exist"
    if competition.market_maturity is not None:
        text += f", {competition.market_maturity.value} market"
    return text


def _timing_summary(timing: TimingScoreInput) -> str:
    text = f"{timing.trend.value} trend, {timing.tailwinds_count} tailwinds vs {timing.headwinds_count} headwinds"
    if timing.timing_window:
        text += f", window: {timing.timing_window}"
    return text


def _sample_size(pain: PainScoreInput | None) -> tuple[SampleSize | None, float | None]:
    if pain is None:
        return None, None
    posts = pain.posts_analyzed if pain.posts_analyzed is not None else pain.total_signals
    for min_posts, label, spread in SAMPLE_SIZE_BANDS:
        if posts >= min_posts:
            description = f"Based on {posts} posts with {pain.total_signals} pain signals ({label.value.replace('_', ' ')})"
            return (
                SampleSize(posts_analyzed=posts, signals_found=pain.total_signals, label=label, description=description),
                spread,
            )
    return None, None  # pragma: no cover - the last band starts at 0


def _data_sufficiency(available: int, pain: PainScoreInput | None) -> tuple[DataSufficiency, str]:
    if available == 0:
        return DataSufficiency.INSUFFICIENT, "No research dimensions have been analyzed yet"
    if pain is not None and pain.total_signals < 10:
        return DataSufficiency.INSUFFICIENT, f"Only {pain.total_signals} pain signals found; too few to judge"
    if pain is None:
        return DataSufficiency.LIMITED, "No community pain data; the verdict rests on secondary analyses"
    if available < 3 or pain.total_signals < 30:
        return DataSufficiency.LIMITED, f"{available} of 4 dimensions analyzed with {pain.total_signals} pain signals"
    if available == 4 and pain.total_signals >= 100:
        return DataSufficiency.STRONG, f"All dimensions analyzed with {pain.total_signals} pain signals"
    return DataSufficiency.ADEQUATE, f"{available} of 4 dimensions analyzed with {pain.total_signals} pain signals"


def _red_flags(pain: PainScoreInput | None, competition: CompetitionScoreInput | None) -> list[RedFlag]:
    flags: list[RedFlag] = []
    if pain is not None and pain.total_signals > 0 and pain.willingness_to_pay_count == 0:
        flags.append(
            RedFlag(
                severity=RedFlagSeverity.HIGH,
                title="No Purchase Intent",
                message=f"None of the {pain.total_signals} pain signals mention paying for a solution",
            )
        )
    if competition is not None and (
        competition.competitor_count >= SATURATED_COMPETITOR_COUNT
        or (competition.has_free_alternatives and competition.market_maturity == MarketMaturity.MATURE)
    ):
        flags.append(
            RedFlag(
                severity=RedFlagSeverity.MEDIUM,
                title="Saturated Market",
                message=f"{competition.competitor_count} competitors in a crowded market; differentiation will be hard",
            )
        )
    return flags


def calculate_hypothesis_confidence(evidence: HypothesisEvidence) -> HypothesisConfidence:
    """Does the evidence match the specific stated hypothesis?

    Direct-signal share dominates; volume and source diversity confirm.
    """
    total = evidence.total_signals
    direct = min(evidence.direct_signal_count, total)
    ratio = direct / total if total > 0 else 0.0

    direct_score = min(10.0, ratio * 12.5)
    volume_score = min(10.0, math.log10(total + 1) * 4)
    multi_source_score = min(10.0, evidence.source_count * 2.5)

    score = round_score(
        direct_score * HYPOTHESIS_WEIGHTS["direct"]
        + volume_score * HYPOTHESIS_WEIGHTS["volume"]
        + multi_source_score * HYPOTHESIS_WEIGHTS["multi_source"]
    )
    if score >= 7:
        level = HypothesisLevel.HIGH
    elif score >= 4:
        level = HypothesisLevel.PARTIAL
    else:
        level = HypothesisLevel.LOW

    return HypothesisConfidence(
        score=score,
        level=level,
        direct_signal_percent=round(ratio * 100),
        signal_volume=total,
        multi_source_confirmation=evidence.source_count >= 2,
        factors=HypothesisFactors(
            direct_signal_score=round_score(direct_score),
            volume_score=round_score(volume_score),
            multi_source_score=round_score(multi_source_score),
        ),
    )


def community_activity_score(pain: PainScoreInput) -> float:
    """Discussion volume plus recency; unknown recency counts as neutral."""
    recency = pain.recency_score if pain.recency_score is not None else 0.5
    return clamp_score(math.log10(pain.total_signals + 1) * 3.5 + recency * 3)


def calculate_market_opportunity(
    market: MarketScoreInput | None,
    timing: TimingScoreInput | None,
    pain: PainScoreInput | None,
) -> MarketOpportunity | None:
    """Is there a viable market at all, regardless of the specific hypothesis?"""
    factors: dict[str, float] = {}
    if market is not None:
        factors["market_size"] = market.score
    if timing is not None:
        factors["timing"] = timing.score
    if pain is not None:
        factors["activity"] = community_activity_score(pain)
    if not factors:
        return None

    total_weight = sum(MARKET_OPPORTUNITY_WEIGHTS[k] for k in factors)
    contributions = {k: v * MARKET_OPPORTUNITY_WEIGHTS[k] / total_weight for k, v in factors.items()}
    score = round_score(sum(contributions.values()))

    if score >= 7:
        level = MarketOpportunityLevel.STRONG
    elif score >= 4:
        level = MarketOpportunityLevel.MODERATE
    else:
        level = MarketOpportunityLevel.WEAK

    def _rounded(key: str) -> float | None:
        return round_score(factors[key]) if key in factors else None

    return MarketOpportunity(
        score=score,
        level=level,
        market_size_score=_rounded("market_size"),
        timing_score=_rounded("timing"),
        activity_score=_rounded("activity"),
        factors=MarketOpportunityFactors(
            market_size_contribution=round_score(contributions.get("market_size", 0.0)),
            timing_contribution=round_score(contributions.get("timing", 0.0)),
            activity_contribution=round_score(contributions.get("activity", 0.0)),
        ),
    )


def _coerce(value, model):
    if value is None or isinstance(value, model):
        return value
    if isinstance(value, (int, float)):
        return model(score=value)
    return model.model_validate(value)


def calculate_viability(
    pain: PainScoreInput | float | None = None,
    market: MarketScoreInput | float | None = None,
    competition: CompetitionScoreInput | float | None = None,
    timing: TimingScoreInput | float | None = None,
    evidence: HypothesisEvidence | None = None,
) -> ViabilityVerdict:
    """Combine whichever dimensions are available into a verdict.

    Args:
        pain: Pain dimension (or a bare score), None if not analyzed
        market: Market dimension, None if not analyzed
        competition: Competition dimension, None if not analyzed
        timing: Timing dimension, None if not analyzed
        evidence: Optional hypothesis evidence for the dual-axis breakdown

    Returns:
        ViabilityVerdict, computed from scratch
    """
    pain = _coerce(pain, PainScoreInput)
    market = _coerce(market, MarketScoreInput)
    competition = _coerce(competition, CompetitionScoreInput)
    timing = _coerce(timing, TimingScoreInput)

    inputs: dict[str, ScoreInput | None] = {PAIN: pain, MARKET: market, COMPETITION: competition, TIMING: timing}
    present = [name for name in DIMENSION_ORDER if inputs[name] is not None]
    weights = normalize_weights(present)

    summaries = {
        PAIN: _pain_summary,
        MARKET: _market_summary,
        COMPETITION: _competition_summary,
        TIMING: _timing_summary,
    }

    dimensions: list[DimensionScore] = []
    for name in present:
        item = inputs[name]
        dimensions.append(
            DimensionScore(
                name=name,
                score=round_score(item.score),
                weight=weights[name],
                confidence=to_confidence(item.confidence),
                status=dimension_status(item.score),
                summary=summaries[name](item),
            )
        )

    sufficiency, sufficiency_reason = _data_sufficiency(len(present), pain)
    hypothesis = calculate_hypothesis_confidence(evidence) if evidence is not None else None
    opportunity = calculate_market_opportunity(market, timing, pain)

    if not present:
        return ViabilityVerdict(
            verdict_label=NO_DATA_LABEL,
            verdict_description=NO_DATA_DESCRIPTION,
            calibrated_verdict_label=NO_DATA_LABEL,
            recommendations=[MISSING_DIMENSION_RECOMMENDATIONS[n] for n in DIMENSION_ORDER][:MAX_RECOMMENDATIONS],
            data_sufficiency=sufficiency,
            data_sufficiency_reason=sufficiency_reason,
            hypothesis_confidence=hypothesis,
        )

    raw_score = sum(inputs[name].score * weights[name] for name in present)
    verdict = verdict_for_score(raw_score)
    overall = round_score(clamp_score(raw_score))

    dealbreakers = [DEALBREAKER_MESSAGES[name] for name in present if inputs[name].score < DEALBREAKER_THRESHOLD]

    recommendations = [MISSING_DIMENSION_RECOMMENDATIONS[n] for n in DIMENSION_ORDER if inputs[n] is None]
    if pain is not None and pain.willingness_to_pay_count == 0:
        recommendations.append(WTP_RECOMMENDATION)
    for dim in sorted(dimensions, key=lambda d: (inputs[d.name].score, DIMENSION_ORDER.index(d.name))):
        if dim.status in (DimensionStatus.CRITICAL, DimensionStatus.NEEDS_WORK):
            recommendations.append(IMPROVEMENT_RECOMMENDATIONS[dim.name])
    if len(present) >= 2:
        recommendations.append(INTERVIEW_RECOMMENDATION)

    # Unrounded scores; min() keeps the first of equal scores, i.e. declaration order
    weakest = min(dimensions, key=lambda d: inputs[d.name].score)

    sample_size, spread = _sample_size(pain)
    limited = sample_size is not None and sample_size.label in (
        SampleSizeLabel.LOW_CONFIDENCE,
        SampleSizeLabel.VERY_LIMITED,
    )
    score_range = (
        ScoreRange(
            low=round_score(clamp_score(raw_score - spread)),
            high=round_score(clamp_score(raw_score + spread)),
        )
        if spread is not None
        else None
    )

    return ViabilityVerdict(
        overall_score=overall,
        verdict=verdict,
        verdict_label=VERDICT_LABELS[verdict],
        verdict_description=VERDICT_DESCRIPTIONS[verdict],
        calibrated_verdict_label=LIMITED_DATA_LABELS[verdict] if limited else VERDICT_LABELS[verdict],
        score_range=score_range,
        dimensions=dimensions,
        is_complete=len(present) == len(DIMENSION_ORDER),
        available_dimensions=len(present),
        total_dimensions=len(DIMENSION_ORDER),
        dealbreakers=dealbreakers,
        recommendations=recommendations[:MAX_RECOMMENDATIONS],
        confidence=aggregate_confidence([d.confidence for d in dimensions]),
        weakest_dimension=weakest,
        data_sufficiency=sufficiency,
        data_sufficiency_reason=sufficiency_reason,
        sample_size=sample_size,
        red_flags=_red_flags(pain, competition),
        hypothesis_confidence=hypothesis,
        market_opportunity=opportunity,
    )
