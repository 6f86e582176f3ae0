"""Embedding-based praise filter.

Drops signals that are pure praise ("love it, 10/10!") so they do not dilute
pain aggregation. A text is praise only when it is close enough to the praise
anchor in absolute terms and clearly closer to it than to the complaint anchor.

"can't" phrasing is ambiguous at the embedding level ("can't live without it"
vs "can't log in"), so a small lexical layer decides those before any
embedding call. Low ratings (<= 3) are never praise. Any backend failure or
timeout fails open: the text is kept.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Sequence

import numpy as np

from .config import Settings
from .embeddings import AnchorCache, EmbeddingBackend, cosine_similarity
from .logging_config import get_logger
from .models import PainSignal, PraiseFilterResult

logger = get_logger(__name__)

PRAISE_ANCHOR = (
    "Amazing app, absolutely love it, perfect solution, highly recommend to everyone, "
    "game changer, exceeded all expectations, five stars, 10 out of 10, totally worth it, "
    "love love love, best decision ever"
)

COMPLAINT_ANCHOR = (
    "App crashes constantly, doesn't work properly, frustrating experience, "
    "waste of money, can't figure out how to use it, keeps logging me out, "
    "missing basic features, requesting refund, terrible support, broken after update"
)

LOW_RATING_MAX = 3

_CANT = r"(?:can'?t|cannot|can not|couldn'?t)"

POSITIVE_CANT_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        rf"{_CANT}\s+imagine\b.{{0,40}}\bwithout\b",
        rf"{_CANT}\s+live\s+without",
        rf"{_CANT}\s+go\s+back",
        rf"{_CANT}\s+recommend\b.{{0,30}}\benough\b",
        rf"{_CANT}\s+believe\s+how\s+(?:easy|good|great|simple|fast|well|helpful|useful)",
        rf"{_CANT}\s+stop\s+using",
        rf"{_CANT}\s+wait\s+(?:to|for)",
        rf"{_CANT}\s+say\s+enough\s+good",
    )
)

EXPLICIT_NO_COMPLAINT_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"nothing\s+(?:bad|negative)\s+to\s+say",
        r"\bno\s+complaints\b",
        r"not\s+a\s+single\s+complaint",
        r"couldn'?t\s+be\s+happier",
        r"wouldn'?t\s+change\s+a\s+thing",
        r"\bno\s+(?:problems|issues)\s+(?:at\s+all|whatsoever|so\s+far)",
        r"never\s+had\s+(?:a|any)\s+(?:problem|issue)s?",
    )
)

COMPLAINT_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        rf"{_CANT}\s+(?:even\s+)?(?:get|figure|find|use|access|log\s*in|login|sign|open|load|connect|sync|save|install|cancel|update)\b",
        rf"{_CANT}\s+recommend\b(?!.{{0,30}}\benough\b)",
        rf"{_CANT}\s+believe\s+how\s+(?:bad|slow|buggy|expensive|terrible|awful|hard)",
        r"\b(?:doesn'?t|does\s+not|won'?t|will\s+not|isn'?t|stopped)\s+(?:work|working|load|loading|open|sync)",
        r"(?<!no )(?<!never )\bcrash(?:es|ed|ing)?\b",
        r"(?<!no )\bbug(?:s|gy)?\b",
        r"(?<!no )\berrors?\b",
        r"\brefund\b",
        r"\bglitch(?:es|y)?\b",
        r"waste\s+of\s+(?:money|time)",
    )
)


def lexical_override(text: str) -> bool | None:
    """Decide praise from phrasing alone, or None to defer to embeddings.

    Any real complaint wins over positive phrasing.
    """
    if any(p.search(text) for p in COMPLAINT_PATTERNS):
        return False
    if any(p.search(text) for p in POSITIVE_CANT_PATTERNS):
        return True
    if any(p.search(text) for p in EXPLICIT_NO_COMPLAINT_PATTERNS):
        return True
    return None


def _signal_text(signal: PainSignal) -> str:
    if signal.title and signal.title not in signal.text:
        return f"{signal.title}\n{signal.text}"
    return signal.text


class PraiseFilter:
    """Classify texts as pure praise using two semantic anchors.

    Args:
        backend: Async embeddings client (``aembed_query``/``aembed_documents``)
        cache: Shared anchor cache; a private one is created when omitted
        settings: Thresholds and timeout, defaults when omitted
    """

    def __init__(
        self,
        backend: EmbeddingBackend,
        cache: AnchorCache | None = None,
        settings: Settings | None = None,
    ):
        self.backend = backend
        self.cache = cache if cache is not None else AnchorCache()
        self.settings = settings or Settings()

    async def _anchors(self) -> list[np.ndarray]:
        return await self.cache.get(self.backend, (PRAISE_ANCHOR, COMPLAINT_ANCHOR))

    def _decide(self, vector: Sequence[float] | None, anchors: list[np.ndarray]) -> PraiseFilterResult:
        if vector is None or len(vector) == 0:
            return PraiseFilterResult()

        praise_sim = cosine_similarity(vector, anchors[0])
        complaint_sim = cosine_similarity(vector, anchors[1])
        margin = praise_sim - complaint_sim
        is_praise = praise_sim > self.settings.praise_min_similarity and margin >= self.settings.praise_margin

        return PraiseFilterResult(
            is_praise=is_praise,
            praise_similarity=round(praise_sim, 4),
            complaint_similarity=round(complaint_sim, 4),
            confidence=round(min(1.0, abs(margin)), 4),
        )

    @staticmethod
    def _pre_classify(text: str, rating: int | None) -> PraiseFilterResult | None:
        if rating is not None and rating <= LOW_RATING_MAX:
            return PraiseFilterResult(is_praise=False, confidence=1.0)
        if not text or not text.strip():
            return PraiseFilterResult()
        override = lexical_override(text)
        if override is not None:
            return PraiseFilterResult(is_praise=override, confidence=1.0)
        return None

    async def classify(self, text: str, rating: int | None = None) -> PraiseFilterResult:
        """Classify one text. Never raises on backend failure."""
        pre = self._pre_classify(text, rating)
        if pre is not None:
            return pre

        async def _embed():
            return await asyncio.gather(self._anchors(), self.backend.aembed_query(text))

        try:
            anchors, vector = await asyncio.wait_for(_embed(), timeout=self.settings.embedding_timeout_seconds)
        except Exception as e:
            logger.warning("praise_filter_degraded", error=str(e)[:200], error_type=type(e).__name__)
            return PraiseFilterResult()

        return self._decide(vector, anchors)

    async def classify_many(self, items: Sequence[tuple[str, int | None]]) -> list[PraiseFilterResult]:
        """Classify (text, rating) pairs with a single batched backend call."""
        results: list[PraiseFilterResult | None] = [self._pre_classify(text, rating) for text, rating in items]
        pending = [i for i, r in enumerate(results) if r is None]

        if pending:
            texts = [items[i][0] for i in pending]

            async def _embed():
                return await asyncio.gather(self._anchors(), self.backend.aembed_documents(texts))

            try:
                anchors, vectors = await asyncio.wait_for(_embed(), timeout=self.settings.embedding_timeout_seconds)
            except Exception as e:
                logger.warning(
                    "praise_filter_degraded",
                    texts=len(texts),
                    error=str(e)[:200],
                    error_type=type(e).__name__,
                )
                anchors, vectors = None, None

            vectors = list(vectors or [])
            for pos, i in enumerate(pending):
                vector = vectors[pos] if pos < len(vectors) else None
                results[i] = self._decide(vector, anchors) if anchors is not None else PraiseFilterResult()

        return [r if r is not None else PraiseFilterResult() for r in results]

    async def filter_signals(self, signals: Sequence[PainSignal]) -> list[PainSignal]:
        """Return the signals that are not pure praise, in their original order."""
        if not signals:
            return []

        verdicts = await self.classify_many([(_signal_text(s), s.source.rating) for s in signals])
        kept = [s for s, v in zip(signals, verdicts) if not v.is_praise]

        logger.info("praise_filter_complete", kept=len(kept), removed=len(signals) - len(kept))
        return kept
