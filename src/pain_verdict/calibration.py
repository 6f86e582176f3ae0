"""Turn a PainSummary into one calibrated pain score.

The average signal score is only a starting point. Willingness-to-pay,
high-intensity share and solution seeking push it up; a pool dominated by
low-intensity chatter pushes it down, and a pool with no high or medium
signals at all is at least halved.
"""

from __future__ import annotations

import math

from .config import Settings
from .models import CalibratedPainScore, DataConfidence, PainSummary, clamp_score, round_score

WTP_BOOST = 1.0
HIGH_SHARE_BOOST = 0.5
HIGH_SHARE_MIN = 0.3
SOLUTION_SHARE_BOOST = 0.5
SOLUTION_SHARE_MIN = 0.2
LOW_QUALITY_PENALTY = 2.0
LOW_DOMINANT_SHARE = 0.6
HIGH_RARE_SHARE = 0.1
NO_PAIN_FACTOR = 0.5

_CONFIDENCE_ORDER = [DataConfidence.VERY_LOW, DataConfidence.LOW, DataConfidence.MEDIUM, DataConfidence.HIGH]


def quality_confidence(summary: PainSummary) -> DataConfidence:
    """Confidence from the intensity mix weighted by log volume.

    Fifty low-intensity mentions say less than twenty high-intensity ones.
    """
    total = summary.total_signals
    if total <= 0:
        return DataConfidence.VERY_LOW

    quality = (
        summary.high_intensity_count * 3
        + summary.medium_intensity_count * 2
        + summary.low_intensity_count * 0.5
        + summary.willingness_to_pay_count * 4
    )
    volume_factor = min(1.0, math.log10(total) / 2)
    score = (quality / total) * 3 * volume_factor

    if summary.low_intensity_count / total > 0.7 and summary.high_intensity_count < 5:
        score *= 0.6
    if summary.high_intensity_count / total > 0.3 or summary.high_intensity_count > 20:
        score *= 1.2

    if score >= 6:
        return DataConfidence.HIGH
    if score >= 3:
        return DataConfidence.MEDIUM
    if score >= 1:
        return DataConfidence.LOW
    return DataConfidence.VERY_LOW


def calibrate(summary: PainSummary, settings: Settings | None = None) -> CalibratedPainScore:
    """Calibrate the pain score of a summary.

    Args:
        summary: Aggregated signals
        settings: WTP boost threshold, defaults when omitted

    Returns:
        CalibratedPainScore with a reasoning string naming every adjustment
    """
    settings = settings or Settings()
    total = summary.total_signals
    if total <= 0:
        return CalibratedPainScore(
            score=0.0,
            confidence=DataConfidence.VERY_LOW,
            reasoning="No pain signals found; nothing to calibrate.",
        )

    average = clamp_score(summary.average_score)
    wtp_share = summary.willingness_to_pay_count / total
    high_share = summary.high_intensity_count / total
    low_share = summary.low_intensity_count / total
    solution_share = summary.solution_seeking_count / total

    score = average
    notes = [f"Average signal score {average:.1f} across {total} signals."]

    if wtp_share > settings.wtp_boost_ratio:
        score += WTP_BOOST
        notes.append(f"+{WTP_BOOST:.1f} for willingness-to-pay in {wtp_share:.0%} of signals.")
    if high_share > HIGH_SHARE_MIN:
        score += HIGH_SHARE_BOOST
        notes.append(f"+{HIGH_SHARE_BOOST:.1f} for high-intensity share of {high_share:.0%}.")
    if solution_share > SOLUTION_SHARE_MIN:
        score += SOLUTION_SHARE_BOOST
        notes.append(f"+{SOLUTION_SHARE_BOOST:.1f} for active solution seeking in {solution_share:.0%} of signals.")
    if low_share > LOW_DOMINANT_SHARE and high_share < HIGH_RARE_SHARE:
        score -= LOW_QUALITY_PENALTY
        notes.append(
            f"-{LOW_QUALITY_PENALTY:.1f} because low-intensity signals dominate ({low_share:.0%}) "
            f"and high-intensity ones are rare ({high_share:.0%})."
        )
    if summary.high_intensity_count == 0 and summary.medium_intensity_count == 0:
        score = max(0.0, score) * NO_PAIN_FACTOR
        notes.append("Halved because no high- or medium-intensity signals were found.")

    score = round_score(clamp_score(score))

    if summary.strongest_signals:
        notes.append(f"Top signals: {', '.join(summary.strongest_signals[:3])}.")

    # Quality-weighted confidence never exceeds what the volume alone supports
    confidence = min(
        quality_confidence(summary),
        summary.data_confidence,
        key=_CONFIDENCE_ORDER.index,
    )
    notes.append(f"Confidence {confidence.value}, weighted by intensity mix and signal volume.")

    return CalibratedPainScore(score=score, confidence=confidence, reasoning=" ".join(notes))
