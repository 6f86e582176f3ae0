"""Pain analysis pipeline.

records -> score -> (dedupe) -> (praise filter) -> summarize -> calibrate,
with theme resonance computed over the surviving signals.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .aggregator import summarize
from .calibration import calibrate
from .config import Settings
from .dedupe import dedupe_signals
from .logging_config import get_logger
from .models import CalibratedPainScore, PainScoreInput, PainSignal, PainSummary, RawRecord, Theme
from .pain_scorer import analyze_records
from .praise_filter import PraiseFilter
from .resonance import calculate_theme_resonance

logger = get_logger(__name__)


@dataclass
class PainAnalysisResult:
    """Result from running the pain analysis."""

    records_in: int
    signals: list[PainSignal]
    duplicates_removed: int
    praise_removed: int
    summary: PainSummary
    calibrated: CalibratedPainScore
    themes: list[Theme] = field(default_factory=list)


async def run_pain_analysis(
    records: Sequence[RawRecord],
    praise_filter: PraiseFilter | None = None,
    themes: Sequence[Theme] | None = None,
    settings: Settings | None = None,
    dedupe: bool = False,
    now: float | None = None,
) -> PainAnalysisResult:
    """Run the pain side of the analysis over raw records.

    Args:
        records: Input records, never modified
        praise_filter: Drops pure-praise signals when given
        themes: Externally derived themes to annotate with resonance
        settings: Thresholds, defaults when omitted
        dedupe: Remove near-duplicate texts before filtering
        now: Reference epoch seconds for recency and age buckets

    Returns:
        PainAnalysisResult
    """
    settings = settings or Settings()

    signals = analyze_records(records, now=now)
    scored = len(signals)
    logger.info("records_scored", records=len(records), signals=scored)

    duplicates_removed = 0
    if dedupe:
        signals = dedupe_signals(signals, threshold=settings.dedupe_threshold)
        duplicates_removed = scored - len(signals)

    praise_removed = 0
    if praise_filter is not None:
        before = len(signals)
        signals = await praise_filter.filter_signals(signals)
        praise_removed = before - len(signals)

    summary = summarize(signals, now=now, settings=settings)
    calibrated = calibrate(summary, settings=settings)
    annotated = calculate_theme_resonance(themes or [], signals, settings=settings)

    logger.info(
        "pain_analysis_complete",
        signals=len(signals),
        duplicates_removed=duplicates_removed,
        praise_removed=praise_removed,
        score=calibrated.score,
        confidence=calibrated.confidence.value,
    )

    return PainAnalysisResult(
        records_in=len(records),
        signals=signals,
        duplicates_removed=duplicates_removed,
        praise_removed=praise_removed,
        summary=summary,
        calibrated=calibrated,
        themes=annotated,
    )


def pain_score_input(
    summary: PainSummary,
    calibrated: CalibratedPainScore,
    posts_analyzed: int | None = None,
) -> PainScoreInput:
    """Build the Pain dimension input for the viability calculator."""
    return PainScoreInput(
        score=calibrated.score,
        confidence=calibrated.confidence,
        total_signals=summary.total_signals,
        willingness_to_pay_count=summary.willingness_to_pay_count,
        posts_analyzed=posts_analyzed,
        recency_score=summary.recency_score,
    )
