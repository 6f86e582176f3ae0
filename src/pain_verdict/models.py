"""Pydantic models for raw records, scored signals, summaries and verdicts."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_SCORE = 0.0
MAX_SCORE = 10.0


def clamp_score(value: float | None) -> float:
    """Clamp a score into [0, 10], mapping None/NaN to 0."""
    if value is None:
        return MIN_SCORE
    value = float(value)
    if math.isnan(value):
        return MIN_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, value))


def round_score(value: float, places: int = 1) -> float:
    """Round half-up (2.25 -> 2.3), unlike the banker's rounding of round()."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


class Intensity(str, Enum):
    """Pain intensity tier of a signal."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WTPConfidence(str, Enum):
    """Confidence that a text expresses willingness to pay."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SourceReliability(str, Enum):
    """How much a platform's WTP language reflects real purchase context."""

    HIGH = "high"  # App store / review platforms
    MEDIUM = "medium"  # Hacker News
    LOW = "low"  # Reddit and other forums


class Emotion(str, Enum):
    """Primary emotion expressed by a signal."""

    FRUSTRATION = "frustration"
    ANXIETY = "anxiety"
    DISAPPOINTMENT = "disappointment"
    CONFUSION = "confusion"
    HOPE = "hope"
    NEUTRAL = "neutral"


class DataConfidence(str, Enum):
    """Four-level confidence used for pain data."""

    VERY_LOW = "very_low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Confidence(str, Enum):
    """Three-level confidence used for dimensions and verdicts."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Resonance(str, Enum):
    """Engagement a theme receives relative to the average signal."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ThemeTier(str, Enum):
    CORE = "core"
    CONTEXTUAL = "contextual"


class DimensionStatus(str, Enum):
    CRITICAL = "critical"
    NEEDS_WORK = "needs_work"
    ADEQUATE = "adequate"
    STRONG = "strong"


class VerdictLevel(str, Enum):
    NONE = "none"
    WEAK = "weak"
    MIXED = "mixed"
    STRONG = "strong"


class VelocityTrend(str, Enum):
    RISING = "rising"
    STABLE = "stable"
    DECLINING = "declining"
    INSUFFICIENT_DATA = "insufficient_data"


class DataSufficiency(str, Enum):
    INSUFFICIENT = "insufficient"
    LIMITED = "limited"
    ADEQUATE = "adequate"
    STRONG = "strong"


class SampleSizeLabel(str, Enum):
    HIGH_CONFIDENCE = "high_confidence"
    MODERATE_CONFIDENCE = "moderate_confidence"
    LOW_CONFIDENCE = "low_confidence"
    VERY_LIMITED = "very_limited"


class RedFlagSeverity(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class HypothesisLevel(str, Enum):
    HIGH = "high"
    PARTIAL = "partial"
    LOW = "low"


class MarketOpportunityLevel(str, Enum):
    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"


class TimingTrend(str, Enum):
    RISING = "rising"
    STABLE = "stable"
    FALLING = "falling"


class MarketMaturity(str, Enum):
    EMERGING = "emerging"
    GROWING = "growing"
    MATURE = "mature"
    DECLINING = "declining"


class Achievability(str, Enum):
    HIGHLY_ACHIEVABLE = "highly_achievable"
    ACHIEVABLE = "achievable"
    CHALLENGING = "challenging"
    DIFFICULT = "difficult"
    UNLIKELY = "unlikely"


# =============================================================================
# INPUT RECORDS AND SIGNALS
# =============================================================================


class RawRecord(BaseModel):
    """A short text (post, review, comment) with its engagement metadata."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Body text of the post/review/comment")
    title: str | None = Field(default=None, description="Title, when the source has one")
    engagement_score: float = Field(default=1.0, ge=0.0, description="Normalized engagement (>= 0)")
    created_at: float | None = Field(default=None, description="Creation time in epoch seconds")
    source_id: str = Field(default="", description="Identifier of the item on its platform")
    source_label: str = Field(default="", description="Community or platform label, e.g. a subreddit")
    rating: int | None = Field(default=None, description="Star rating 1..5 for reviews")
    url: str | None = Field(default=None)
    upvotes: int | None = Field(default=None, description="Raw upvotes / points / thumbs up")
    num_comments: int | None = Field(default=None)

    @field_validator("text", mode="before")
    @classmethod
    def coerce_text(cls, v: object) -> str:
        return "" if v is None else str(v)

    @field_validator("engagement_score", mode="before")
    @classmethod
    def clamp_engagement(cls, v: object) -> float:
        """Default missing engagement to 1, clamp negatives and NaN to 0."""
        if v is None:
            return 1.0
        value = float(v)
        if math.isnan(value) or value < 0:
            return 0.0
        return value

    @field_validator("created_at", mode="before")
    @classmethod
    def drop_invalid_timestamp(cls, v: object) -> float | None:
        if v is None:
            return None
        value = float(v)
        if math.isnan(value) or value <= 0:
            return None
        return value

    @field_validator("rating", mode="before")
    @classmethod
    def clamp_rating(cls, v: object) -> int | None:
        if v is None:
            return None
        value = float(v)
        if math.isnan(value):
            return None
        return int(max(1, min(5, round(value))))


class PainSignal(BaseModel):
    """One scored record. Read-only once created."""

    model_config = ConfigDict(frozen=True)

    text: str
    title: str | None = None
    score: float = Field(default=0.0, ge=0.0, le=10.0)
    intensity: Intensity = Intensity.LOW
    signals: list[str] = Field(default_factory=list, description="Matched tokens, insertion order, unique")
    solution_seeking: bool = False
    willingness_to_pay_signal: bool = False
    wtp_confidence: WTPConfidence = WTPConfidence.NONE
    wtp_source_reliability: SourceReliability | None = None
    has_negative_context: bool = False
    has_wtp_exclusion: bool = False
    emotion: Emotion = Emotion.NEUTRAL
    source: RawRecord = Field(default_factory=RawRecord)

    @field_validator("score", mode="before")
    @classmethod
    def clamp(cls, v: object) -> float:
        return clamp_score(v)  # type: ignore[arg-type]


class PraiseFilterResult(BaseModel):
    """Outcome of classifying one text as praise or not."""

    is_praise: bool = False
    praise_similarity: float = 0.0
    complaint_similarity: float = 0.0
    confidence: float = 0.0


# =============================================================================
# SUMMARY
# =============================================================================


class SourceCount(BaseModel):
    name: str
    count: int


class WTPQuote(BaseModel):
    text: str
    source: str
    url: str | None = None
    created_at: float | None = None
    upvotes: int | None = None
    num_comments: int | None = None
    rating: int | None = None


class TemporalDistribution(BaseModel):
    last_30_days: int = 0
    last_90_days: int = 0
    last_180_days: int = 0
    older: int = 0


class DateRange(BaseModel):
    oldest: str  # ISO date
    newest: str  # ISO date


class DiscussionVelocity(BaseModel):
    """Recent (0-90 days) vs previous (91-180 days) discussion volume."""

    percentage_change: int | None = None
    trend: VelocityTrend = VelocityTrend.INSUFFICIENT_DATA
    recent_count: int = 0
    previous_count: int = 0
    confidence: str = "none"  # none | low | medium | high
    insufficient_data: bool = True


def _empty_emotions() -> dict[Emotion, int]:
    return {emotion: 0 for emotion in Emotion}


class PainSummary(BaseModel):
    """Aggregate statistics over a set of pain signals. Always recomputable."""

    total_signals: int = 0
    average_score: float = 0.0
    high_intensity_count: int = 0
    medium_intensity_count: int = 0
    low_intensity_count: int = 0
    solution_seeking_count: int = 0
    willingness_to_pay_count: int = 0
    top_sources: list[SourceCount] = Field(default_factory=list)
    data_confidence: DataConfidence = DataConfidence.VERY_LOW
    strongest_signals: list[str] = Field(default_factory=list)
    wtp_quotes: list[WTPQuote] = Field(default_factory=list)
    temporal_distribution: TemporalDistribution = Field(default_factory=TemporalDistribution)
    recency_score: float = Field(default=0.0, ge=0.0, le=1.0)
    emotions_breakdown: dict[Emotion, int] = Field(default_factory=_empty_emotions)
    date_range: DateRange | None = None
    discussion_velocity: DiscussionVelocity = Field(default_factory=DiscussionVelocity)


class CalibratedPainScore(BaseModel):
    score: float = Field(..., ge=0.0, le=10.0)
    confidence: DataConfidence
    reasoning: str


# =============================================================================
# THEMES
# =============================================================================


class Theme(BaseModel):
    """An externally derived theme, annotated with resonance once computed."""

    name: str
    description: str = ""
    intensity: Intensity = Intensity.MEDIUM
    frequency: int = 0
    examples: list[str] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    tier: ThemeTier = ThemeTier.CORE
    keywords: list[str] = Field(default_factory=list, description="Known signal tokens for this theme")
    resonance: Resonance | None = None


# =============================================================================
# VIABILITY INPUTS
# =============================================================================


class _ScoreInput(BaseModel):
    score: float = Field(..., ge=0.0, le=10.0)
    confidence: DataConfidence = DataConfidence.MEDIUM

    @field_validator("score", mode="before")
    @classmethod
    def clamp(cls, v: object) -> float:
        return clamp_score(v)  # type: ignore[arg-type]


class PainScoreInput(_ScoreInput):
    """Pain dimension, normally built from a CalibratedPainScore and its summary."""

    total_signals: int = Field(default=0, ge=0)
    willingness_to_pay_count: int = Field(default=0, ge=0)
    posts_analyzed: int | None = Field(default=None, ge=0, description="Posts that passed relevance filtering")
    recency_score: float | None = Field(default=None, ge=0.0, le=1.0)


class MarketScoreInput(_ScoreInput):
    penetration_required: float | None = Field(default=None, ge=0.0, description="Percent of market needed")
    achievability: Achievability | None = None


class CompetitionScoreInput(_ScoreInput):
    competitor_count: int = Field(default=0, ge=0)
    threats: list[str] = Field(default_factory=list)
    has_free_alternatives: bool = False
    market_maturity: MarketMaturity | None = None


class TimingScoreInput(_ScoreInput):
    trend: TimingTrend = TimingTrend.STABLE
    tailwinds_count: int = Field(default=0, ge=0)
    headwinds_count: int = Field(default=0, ge=0)
    timing_window: str = ""


class HypothesisEvidence(BaseModel):
    """How much of the collected evidence speaks to the specific hypothesis."""

    direct_signal_count: int = Field(default=0, ge=0, description="Signals matching the hypothesis directly")
    total_signals: int = Field(default=0, ge=0)
    source_count: int = Field(default=0, ge=0, description="Distinct communities/platforms")


# =============================================================================
# VERDICT
# =============================================================================


class DimensionScore(BaseModel):
    name: str
    score: float = Field(..., ge=0.0, le=10.0)
    weight: float = Field(default=0.0, ge=0.0, le=1.0)
    confidence: Confidence
    status: DimensionStatus
    summary: str | None = None


class SampleSize(BaseModel):
    posts_analyzed: int
    signals_found: int
    label: SampleSizeLabel
    description: str


class ScoreRange(BaseModel):
    low: float
    high: float


class RedFlag(BaseModel):
    severity: RedFlagSeverity
    title: str
    message: str


class HypothesisFactors(BaseModel):
    direct_signal_score: float
    volume_score: float
    multi_source_score: float


class HypothesisConfidence(BaseModel):
    """Does the evidence match the specific stated hypothesis?"""

    score: float
    level: HypothesisLevel
    direct_signal_percent: int
    signal_volume: int
    multi_source_confirmation: bool
    factors: HypothesisFactors


class MarketOpportunityFactors(BaseModel):
    market_size_contribution: float
    timing_contribution: float
    activity_contribution: float


class MarketOpportunity(BaseModel):
    """Is there a viable market at all, independent of the hypothesis?"""

    score: float
    level: MarketOpportunityLevel
    market_size_score: float | None = None
    timing_score: float | None = None
    activity_score: float | None = None
    factors: MarketOpportunityFactors


class ViabilityVerdict(BaseModel):
    overall_score: float = Field(default=0.0, ge=0.0, le=10.0)
    verdict: VerdictLevel = VerdictLevel.NONE
    verdict_label: str = ""
    verdict_description: str = ""
    calibrated_verdict_label: str = ""
    score_range: ScoreRange | None = None
    dimensions: list[DimensionScore] = Field(default_factory=list)
    is_complete: bool = False
    available_dimensions: int = 0
    total_dimensions: int = 4
    dealbreakers: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    confidence: Confidence = Confidence.LOW
    weakest_dimension: DimensionScore | None = None
    data_sufficiency: DataSufficiency = DataSufficiency.INSUFFICIENT
    data_sufficiency_reason: str = ""
    sample_size: SampleSize | None = None
    red_flags: list[RedFlag] = Field(default_factory=list)
    hypothesis_confidence: HypothesisConfidence | None = None
    market_opportunity: MarketOpportunity | None = None
