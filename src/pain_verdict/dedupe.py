"""Near-duplicate signal removal using rapidfuzz.

Cross-posts and quoted replies repeat the same complaint almost verbatim;
counting them twice inflates volume-based confidence. Token-set similarity
ignores word order and small edits.
"""

from __future__ import annotations

from collections.abc import Sequence

from rapidfuzz import fuzz

from .logging_config import get_logger
from .models import PainSignal

logger = get_logger(__name__)

# Texts shorter than this are too generic to call duplicates
MIN_DEDUPE_LENGTH = 20


def similarity_ratio(a: str, b: str) -> float:
    """Calculate similarity ratio between two strings using token-based matching.

    Args:
        a: First string
        b: Second string

    Returns:
        Similarity ratio between 0.0 and 1.0
    """
    # Score is 0-100, normalize to 0-1
    return fuzz.token_set_ratio(a.lower(), b.lower()) / 100.0


def dedupe_signals(signals: Sequence[PainSignal], threshold: float = 0.92) -> list[PainSignal]:
    """Drop signals whose text near-duplicates an earlier one.

    Keeps the first occurrence and the input order. Signals are never
    modified.

    Args:
        signals: Scored signals, in the order they should be kept
        threshold: Minimum similarity (0.0-1.0) to count as a duplicate

    Returns:
        New list without the duplicates
    """
    if not signals:
        return []

    kept: list[PainSignal] = []
    kept_texts: list[str] = []
    removed = 0

    for signal in signals:
        text = signal.text.strip()
        if len(text) >= MIN_DEDUPE_LENGTH:
            match = next(
                (i for i, other in enumerate(kept_texts) if other and similarity_ratio(text, other) >= threshold),
                None,
            )
            if match is not None:
                removed += 1
                logger.debug(
                    "duplicate_found",
                    canonical=kept[match].source.source_id,
                    duplicate=signal.source.source_id,
                )
                continue
            kept_texts.append(text)
        else:
            kept_texts.append("")
        kept.append(signal)

    logger.info(
        "deduplication_complete",
        original_count=len(signals),
        kept_count=len(kept),
        duplicates_removed=removed,
    )
    return kept
