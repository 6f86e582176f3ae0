"""Theme resonance: how much engagement a theme draws relative to the average."""

from __future__ import annotations

import re
from collections.abc import Sequence

from .config import Settings
from .models import PainSignal, Resonance, Theme

# Words in theme names that carry no topic on their own
STOPWORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "in", "into",
        "is", "it", "of", "on", "or", "the", "to", "too", "with", "without", "not",
        "no", "lack", "lacking", "poor", "bad", "issues", "problems", "difficulty",
    }
)
MIN_WORD_LENGTH = 3


def theme_keywords(theme: Theme) -> list[str]:
    """Significant lower-cased words of the theme name plus its known tokens."""
    words = [w for w in re.findall(r"[a-z0-9']+", theme.name.lower()) if len(w) >= MIN_WORD_LENGTH and w not in STOPWORDS]
    keywords = dict.fromkeys([*words, *(k.lower().strip() for k in theme.keywords if k.strip())])
    return list(keywords)


def _matches(signal: PainSignal, keywords: list[str]) -> bool:
    text = f"{signal.title or ''}\n{signal.text}".lower()
    return any(k in text for k in keywords)


def classify_ratio(ratio: float, settings: Settings | None = None) -> Resonance:
    settings = settings or Settings()
    if ratio > settings.resonance_high_ratio:
        return Resonance.HIGH
    if ratio < settings.resonance_low_ratio:
        return Resonance.LOW
    return Resonance.MEDIUM


def calculate_theme_resonance(
    themes: Sequence[Theme],
    signals: Sequence[PainSignal],
    settings: Settings | None = None,
) -> list[Theme]:
    """Return copies of the themes with resonance set where it can be computed.

    Themes that match no signal keep ``resonance=None``. With no signals every
    theme comes back unchanged.
    """
    if not signals:
        return [t.model_copy() for t in themes]

    overall = sum(s.source.engagement_score for s in signals) / len(signals)

    annotated: list[Theme] = []
    for theme in themes:
        keywords = theme_keywords(theme)
        matched = [s for s in signals if keywords and _matches(s, keywords)]
        if not matched:
            annotated.append(theme.model_copy())
            continue

        theme_mean = sum(s.source.engagement_score for s in matched) / len(matched)
        # No engagement anywhere: every theme is exactly average
        ratio = theme_mean / overall if overall > 0 else 1.0
        annotated.append(theme.model_copy(update={"resonance": classify_ratio(ratio, settings)}))

    return annotated
