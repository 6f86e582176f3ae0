import pytest
from unittest.mock import MagicMock, AsyncMock
from pain_verdict.config import Settings
from pain_verdict.models import PainSignal, RawRecord, Intensity, WTPConfidence, Emotion
from pain_verdict.pain_scorer import get_intensity
from pain_verdict.praise_filter import PRAISE_ANCHOR, COMPLAINT_ANCHOR

NOW = 1_760_000_000.0
DAY = 86400


def fake_vector(text):
    """Tiny 3-d embedding space: x = praise, y = complaint, z = unrelated."""
    if text == PRAISE_ANCHOR:
        return [1.0, 0.0, 0.0]
    if text == COMPLAINT_ANCHOR:
        return [0.0, 1.0, 0.0]
    lower = text.lower()
    if "mixed feelings" in lower:
        return [0.7, 0.65, 0.0]
    if "amazing" in lower or "love" in lower:
        return [0.9, 0.1, 0.1]
    if "broken" in lower or "slow" in lower:
        return [0.1, 0.9, 0.1]
    return [0.3, 0.3, 0.9]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    """Default settings, independent of the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def mock_embeddings():
    """Mock embeddings backend with LangChain's async interface."""
    backend = MagicMock()
    backend.aembed_query = AsyncMock(side_effect=fake_vector)
    backend.aembed_documents = AsyncMock(side_effect=lambda texts: [fake_vector(t) for t in texts])
    return backend


@pytest.fixture
def make_record():
    def _make(text="", **kwargs):
        return RawRecord(text=text, **kwargs)
    return _make


@pytest.fixture
def make_signal():
    """Build a PainSignal directly, bypassing the scorer."""
    def _make(
        text="Something hurts",
        score=5.0,
        source_label="r/test",
        engagement_score=1.0,
        created_at=None,
        rating=None,
        signals=None,
        solution_seeking=False,
        wtp=WTPConfidence.NONE,
        emotion=Emotion.NEUTRAL,
        intensity=None,
        title=None,
        source_id="",
    ):
        return PainSignal(
            text=text,
            title=title,
            score=score,
            intensity=intensity or get_intensity(score),
            signals=signals or [],
            solution_seeking=solution_seeking,
            willingness_to_pay_signal=wtp != WTPConfidence.NONE,
            wtp_confidence=wtp,
            emotion=emotion,
            source=RawRecord(
                text=text,
                title=title,
                engagement_score=engagement_score,
                created_at=created_at,
                source_label=source_label,
                source_id=source_id,
                rating=rating,
            ),
        )
    return _make


@pytest.fixture
def sample_records():
    """A small realistic batch: pain, solution seeking, WTP, praise and noise."""
    return [
        RawRecord(
            text="Reconciling invoices by hand is a nightmare. I'm so frustrated. Anyone know a better tool?",
            engagement_score=12.0,
            created_at=NOW - 5 * DAY,
            source_id="p1",
            source_label="smallbusiness",
        ),
        RawRecord(
            text="I would pay for something that syncs my bank feed properly, it's so tedious",
            engagement_score=4.0,
            created_at=NOW - 40 * DAY,
            source_id="p2",
            source_label="smallbusiness",
        ),
        RawRecord(
            text="Struggling with payroll every month, it's confusing and time consuming",
            engagement_score=2.0,
            created_at=NOW - 120 * DAY,
            source_id="p3",
            source_label="accounting",
        ),
        RawRecord(
            text="Amazing app, I love it, highly recommend. Worth it for the problem it solves.",
            engagement_score=1.0,
            created_at=NOW - 10 * DAY,
            source_id="r1",
            source_label="google_play",
            rating=5,
        ),
        RawRecord(
            text="Lovely weather for a picnic today.",
            engagement_score=1.0,
            created_at=NOW - 2 * DAY,
            source_id="p4",
            source_label="casual",
        ),
    ]
