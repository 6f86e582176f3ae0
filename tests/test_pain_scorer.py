import pytest
from pain_verdict.lexicon import PAIN_KEYWORDS, PainTier
from pain_verdict.models import Emotion, Intensity, RawRecord, SourceReliability, WTPConfidence
from pain_verdict.pain_scorer import (
    LOW_ONLY_CAP,
    TITLE_ONLY_PREFIX,
    TITLE_ONLY_TOKEN,
    analyze_records,
    build_pain_signal,
    calculate_engagement_score,
    combine_signals,
    detect_emotion,
    engagement_multiplier,
    get_intensity,
    has_negative_context,
    has_wtp_exclusion,
    match_keyword,
    recency_multiplier,
    score_text,
    wtp_source_reliability,
)

from conftest import NOW, DAY


@pytest.mark.parametrize("text", [
    "",
    "   ",
    "The weather today is sunny and calm.",
    "I hardly ever use it.",
])
def test_no_keywords_scores_zero(text):
    """Text without any keyword match scores 0 with no signals."""
    result = score_text(text)
    assert result.score == 0
    assert result.signals == []
    assert result.intensity == Intensity.LOW


def test_single_word_matches_on_word_boundary():
    """Single words never fire inside longer words."""
    assert match_keyword("this is hard", "hard")
    assert not match_keyword("i hardly notice", "hard")
    assert not match_keyword("the hardware is fine", "hard")
    assert match_keyword("hard, but fine", "hard")


def test_phrase_matches_by_substring():
    """Multi-word phrases match anywhere in the text."""
    assert match_keyword("honestly i'm fed up with it", "fed up")
    assert match_keyword("a total waste of time.", "waste of time")
    assert not match_keyword("fed, then up", "fed up")


def test_hardly_does_not_score_as_struggle():
    """'hardly' is not the medium-tier 'hard'."""
    assert "hard" in PAIN_KEYWORDS[PainTier.MEDIUM]
    assert score_text("This is hard").score > 0
    assert score_text("I hardly mind").score == 0


def test_low_tier_only_is_capped():
    """Low-tier-only text never exceeds 4.0, even with engagement and recency."""
    text = "Maybe I am wondering, perhaps curious, considering, exploring, researching options sometimes"
    result = score_text(text, engagement_score=1e9, created_at=NOW - DAY, now=NOW)
    assert result.low_count >= 5
    assert result.high_count == result.medium_count == 0
    assert result.score <= LOW_ONLY_CAP
    assert result.intensity != Intensity.HIGH


def test_high_tier_can_push_score_to_high():
    """Several high-tier hits plus solution seeking land in the high band."""
    result = score_text("This is a nightmare, I'm frustrated and fed up. Anyone know an alternative?")
    assert result.score >= 7
    assert result.intensity == Intensity.HIGH
    assert result.strongest_signal == "nightmare"


def test_solution_seeking_boosts_pain():
    """Pain plus solution seeking scores strictly higher than the pain alone."""
    pain_only = score_text("Bookkeeping is a nightmare")
    with_solution = score_text("Bookkeeping is a nightmare, any suggestions?")
    assert with_solution.solution_seeking
    assert not pain_only.solution_seeking
    assert with_solution.score > pain_only.score


@pytest.mark.parametrize("base,addition", [
    ("Invoicing is a struggle", " and a nightmare"),
    ("Maybe wondering about invoicing", " it is a nightmare"),
    ("Anyone know a tool for invoices", " I'm frustrated"),
])
def test_adding_high_tier_never_decreases_score(base, addition):
    """Monotonicity: a high-intensity match cannot lower a non-zero score."""
    before = score_text(base)
    after = score_text(base + addition)
    assert before.score > 0
    assert after.score >= before.score


def test_wtp_detected_with_confidence():
    """Strong-intent phrases give high WTP confidence."""
    result = score_text("Take my money! I would pay for this tomorrow")
    assert result.willingness_to_pay_signal
    assert result.wtp_confidence == WTPConfidence.HIGH
    assert not result.has_wtp_exclusion


def test_value_signal_is_low_confidence():
    result = score_text("It would save time for sure")
    assert result.wtp_confidence == WTPConfidence.LOW


@pytest.mark.parametrize("text", [
    "I'd pay for something better, but right now I want my money back.",
    "Would pay for a fix, but I regret buying this",
    "Our budget was cut so I can't afford the premium plan",
    "Biggest waste of money, I would pay to undo it",
])
def test_wtp_exclusion_wins(text):
    """Refunds, remorse and budget cuts force WTP confidence to none."""
    result = score_text(text)
    assert result.has_wtp_exclusion
    assert result.wtp_confidence == WTPConfidence.NONE
    assert not result.willingness_to_pay_signal


@pytest.mark.parametrize("negative,plain", [
    ("I hate the competition", "I hate the paperwork"),
    ("It would be terrible if the export failed", "The export failed and it was terrible"),
    ("I used to be frustrated with invoicing", "I am frustrated with invoicing"),
    (
        "I hate the competition. Their tool is a nightmare, terrible, awful, horrible, broken, useless, worst",
        "I hate the paperwork. Their tool is a nightmare, terrible, awful, horrible, broken, useless, worst",
    ),
])
def test_negative_context_penalized(negative, plain):
    """Same pain words in a hypothetical/competitor/resolved context score lower."""
    neg = score_text(negative)
    pos = score_text(plain)
    assert neg.has_negative_context
    assert not pos.has_negative_context
    assert 0 < neg.score < pos.score


def test_negative_context_penalized_at_ceiling():
    """Text that saturates at 10 still loses points in a competitor context."""
    words = "Their tool is a nightmare, terrible, awful, horrible, broken, useless, worst"
    assert score_text(f"I hate the paperwork. {words}").score == 10.0
    assert score_text(f"I hate the competition. {words}").score == pytest.approx(6.0)


def test_negative_context_and_exclusion_helpers():
    assert has_negative_context("anyone else frustrated by this?")
    assert not has_negative_context("i am frustrated by this")
    assert has_wtp_exclusion("i am asking for a refund")
    assert not has_wtp_exclusion("i would pay for this")


def test_engagement_multiplier_bounds():
    assert engagement_multiplier(None) == 1.0
    assert engagement_multiplier(0) == 1.0
    assert engagement_multiplier(float("nan")) == 1.0
    assert engagement_multiplier(10) == pytest.approx(1.05)
    assert engagement_multiplier(1e12) == 1.2


def test_engagement_is_bounded_and_monotone():
    """Huge engagement scores at most 1.3x the engagement=1 score."""
    text = "Invoicing is a nightmare and I am so frustrated"
    base = score_text(text, engagement_score=1).score
    scores = [score_text(text, engagement_score=e).score for e in (0, 1, 10, 1e3, 1e9, 1e15)]
    assert scores == sorted(scores)
    assert scores[-1] <= 1.3 * base


def test_recency_multiplier_bands():
    assert recency_multiplier(None, now=NOW) == 1.0
    assert recency_multiplier(NOW - 10 * DAY, now=NOW) == 1.5
    assert recency_multiplier(NOW - 60 * DAY, now=NOW) == 1.25
    assert recency_multiplier(NOW - 120 * DAY, now=NOW) == 1.0
    assert recency_multiplier(NOW - 200 * DAY, now=NOW) == 0.75
    assert recency_multiplier(NOW - 400 * DAY, now=NOW) == 0.5


@pytest.mark.parametrize("score,expected", [
    (10.0, Intensity.HIGH),
    (7.0, Intensity.HIGH),
    (6.9, Intensity.MEDIUM),
    (4.0, Intensity.MEDIUM),
    (3.9, Intensity.LOW),
    (0.0, Intensity.LOW),
])
def test_get_intensity(score, expected):
    assert get_intensity(score) == expected


def test_intensity_follows_score():
    for text in ("nightmare", "I'm struggling", "maybe wondering", "fed up, sick of it, what a nightmare"):
        result = score_text(text)
        assert result.intensity == get_intensity(result.score)


def test_signals_are_unique_and_ordered():
    result = score_text("Frustrated, frustrated, FRUSTRATED and struggling")
    assert result.signals.count("frustrated") == 1
    assert result.signals.index("frustrated") < result.signals.index("struggling")


@pytest.mark.parametrize("text,expected", [
    ("I'm so frustrated and annoyed", Emotion.FRUSTRATION),
    ("So confused, no idea what am I doing", Emotion.CONFUSION),
    ("Really worried and stressed about taxes", Emotion.ANXIETY),
    ("", Emotion.NEUTRAL),
    ("Nice day", Emotion.NEUTRAL),
])
def test_detect_emotion(text, expected):
    assert detect_emotion(text) == expected


def test_calculate_engagement_score():
    assert calculate_engagement_score(0, 0) == 0
    assert calculate_engagement_score(9, 9) == pytest.approx(5.0)
    assert calculate_engagement_score(-5, None) == 0


def test_wtp_source_reliability():
    assert wtp_source_reliability("google_play") == SourceReliability.HIGH
    assert wtp_source_reliability("HackerNews") == SourceReliability.MEDIUM
    assert wtp_source_reliability("smallbusiness") == SourceReliability.LOW


def test_build_pain_signal_copies_metadata(make_record):
    record = make_record(
        "I would pay for a tool that fixes this nightmare",
        source_label="app_store",
        source_id="abc",
        engagement_score=3,
    )
    signal = build_pain_signal(record)
    assert signal is not None
    assert signal.source == record
    assert signal.willingness_to_pay_signal
    assert signal.wtp_source_reliability == SourceReliability.HIGH


def test_build_pain_signal_skips_no_signal(make_record):
    assert build_pain_signal(make_record("Lovely weather for a picnic today.")) is None


def test_title_only_record_is_down_weighted(make_record):
    """Title-only records score on the title at 70% weight."""
    record = make_record(f"{TITLE_ONLY_PREFIX} body unavailable", title="Payroll is a nightmare")
    signal = build_pain_signal(record)
    full = score_text("Payroll is a nightmare")
    assert signal.score == pytest.approx(full.score * 0.7)
    assert signal.signals[-1] == TITLE_ONLY_TOKEN


def test_analyze_records_sorted_and_filtered(sample_records):
    signals = analyze_records(sample_records, now=NOW)
    assert len(signals) == 4
    scores = [s.score for s in signals]
    assert scores == sorted(scores, reverse=True)
    assert all(s.source.source_id != "p4" for s in signals)


def test_analyze_records_does_not_mutate(sample_records):
    snapshot = [r.model_copy() for r in sample_records]
    analyze_records(sample_records, now=NOW)
    assert sample_records == snapshot


def test_combine_signals_orders_by_score_then_engagement(make_signal):
    a = make_signal("a", score=5.0, engagement_score=1)
    b = make_signal("b", score=5.0, engagement_score=10)
    c = make_signal("c", score=8.0)
    combined = combine_signals([a], [b, c])
    assert [s.text for s in combined] == ["c", "b", "a"]


def test_raw_record_clamps_bad_inputs():
    record = RawRecord(text=None, engagement_score=-3, rating=9, created_at=float("nan"))
    assert record.text == ""
    assert record.engagement_score == 0
    assert record.rating == 5
    assert record.created_at is None
    assert RawRecord(engagement_score=None).engagement_score == 1.0
