"""Keyword lexicon for pain scoring.

Pure data: tiered pain keywords, solution-seeking phrases, willingness-to-pay
families, WTP exclusions, negative-context patterns and emotion clusters.
Single words are matched on word boundaries, multi-word phrases by substring
(see ``pain_scorer.match_keyword``).
"""

from __future__ import annotations

import re
from enum import Enum

from .models import Emotion, WTPConfidence


class PainTier(str, Enum):
    """Keyword tiers and their raw point weight."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    SOLUTION_SEEKING = "solution_seeking"


TIER_WEIGHTS: dict[PainTier, int] = {
    PainTier.HIGH: 3,
    PainTier.MEDIUM: 2,
    PainTier.LOW: 1,
    PainTier.SOLUTION_SEEKING: 2,
}

# Every WTP match is worth this many raw points regardless of family
WTP_WEIGHT = 4

PAIN_KEYWORDS: dict[PainTier, tuple[str, ...]] = {
    # Strong emotional pain
    PainTier.HIGH: (
        # Frustration cluster
        "nightmare", "nightmarish", "hate", "hated", "hating",
        "frustrated", "frustrating", "frustration",
        "desperate", "desperately", "furious", "infuriating",
        "fed up", "sick of", "tired of", "done with",
        "can't stand", "cannot stand", "at my wit's end",
        # Extreme negative
        "terrible", "terribly", "awful", "awfully", "horrible", "horrendous",
        "worst", "impossible", "impossibly", "unbearable",
        "broken", "useless", "worthless", "pointless",
        # Exhaustion / burnout
        "exhausted", "exhausting", "overwhelmed", "overwhelms",
        "burning out", "burnt out", "burned out",
        "killing me", "driving me crazy", "driving me insane",
        # Giving up
        "giving up", "gave up", "give up", "about to quit",
        "ready to quit", "breaking point", "last straw",
        # Value negative
        "waste of time", "waste of money", "total waste",
        "complete disaster", "absolute mess", "utter failure",
    ),
    # Clear problem statements
    PainTier.MEDIUM: (
        # Struggle
        "struggle", "struggling", "struggled", "struggles",
        "difficult", "difficulty", "difficulties",
        "hard", "harder", "hardest",
        "challenging", "challenge", "challenges",
        # Problem / issue
        "problem", "problems", "problematic",
        "issue", "issues",
        "concern", "concerned", "concerning", "concerns",
        "worried", "worry", "worrying",
        # Confusion
        "confusing", "confused", "confusion",
        "unclear", "complicated", "complex",
        "overwhelming",
        # Annoyance
        "annoying", "annoyed", "annoyance", "irritating", "irritated",
        "disappointing", "disappointed", "disappointment",
        "lacking", "missing", "incomplete", "inadequate",
        # Blocked / stuck
        "stuck", "blocked", "blocking", "obstacle",
        "failing", "failed", "fail", "failure",
        "not working", "doesn't work", "won't work", "isn't working",
        "can't figure out", "cannot figure out",
        "no idea how", "don't know how", "don't understand",
        # Time / effort
        "takes too long", "time consuming", "tedious",
        "manual process", "repetitive", "cumbersome",
    ),
    # Mild interest / exploration
    PainTier.LOW: (
        "wondering", "curious", "curious about",
        "thinking about", "considering", "contemplating",
        "looking into", "exploring", "researching",
        "might", "maybe", "perhaps",
        "sometimes", "occasionally", "once in a while",
        "wish there was", "wish i could", "would be nice",
        "could be better", "room for improvement",
    ),
    # Active demand, cross-cutting
    PainTier.SOLUTION_SEEKING: (
        # Direct asks
        "looking for", "searching for", "seeking",
        "in search of", "trying to find", "need to find",
        # Recommendation requests
        "anyone know", "does anyone know", "anybody know",
        "recommendations", "recommend", "recommended",
        "suggestions", "suggest", "suggested",
        "advice", "advise", "guidance",
        # Help requests
        "help with", "need help", "please help", "can someone help",
        "how do i", "how can i", "how should i", "how would i",
        "what do you use", "what should i use", "what would you recommend",
        "best way to", "better way to", "easier way to",
        # Alternatives
        "alternatives", "alternative to", "instead of",
        "similar to", "like but",
        # Tips / ideas
        "tips", "tip for", "tricks", "hacks",
        "any ideas", "any thoughts", "any suggestions",
        "would appreciate", "greatly appreciate",
    ),
}


class WTPFamily(str, Enum):
    STRONG_INTENT = "strong_intent"
    ENTERPRISE_INTENT = "enterprise_intent"
    FINANCIAL_DISCUSSION = "financial_discussion"
    PURCHASE_INTENT = "purchase_intent"
    VALUE_SIGNALS = "value_signals"


WTP_KEYWORDS: dict[WTPFamily, tuple[str, ...]] = {
    WTPFamily.STRONG_INTENT: (
        "would pay", "willing to pay", "happy to pay",
        "i'd pay", "i would pay", "i'll pay",
        "take my money", "shut up and take",
        "worth paying", "worth every penny",
        "money is no object", "whatever it costs",
    ),
    # B2B buyers phrase intent through their organization
    WTPFamily.ENTERPRISE_INTENT: (
        "wish my company", "wish our company", "wish my team",
        "wish we had this at work", "need this at work",
        "recommend to my manager", "recommend to management",
        "convince my boss", "convince management", "convince my manager",
        "propose to leadership", "pitch to leadership",
        "our team needs", "our company needs", "our organization needs",
        "enterprise version", "enterprise plan", "business plan",
        "company should adopt", "team should use", "we should switch to",
        "would improve our workflow", "would save our team",
        "getting my company to", "getting my team to",
    ),
    WTPFamily.FINANCIAL_DISCUSSION: (
        "budget", "budgeting", "budget for",
        "pricing", "price point", "price range",
        "how much does", "how much would", "cost of",
        "investment", "invest in", "roi",
        "subscription", "subscribe", "monthly fee",
        "premium", "upgrade", "pro version", "paid version",
    ),
    WTPFamily.PURCHASE_INTENT: (
        "where can i buy", "where to buy", "how to purchase",
        "looking to invest", "ready to invest",
        "considering paying", "thinking of paying",
    ),
    WTPFamily.VALUE_SIGNALS: (
        "worth the money", "worth it", "value for money",
        "save time", "save money", "save hours",
        "pay for convenience", "pay for quality",
    ),
}

WTP_FAMILY_CONFIDENCE: dict[WTPFamily, WTPConfidence] = {
    WTPFamily.STRONG_INTENT: WTPConfidence.HIGH,
    WTPFamily.ENTERPRISE_INTENT: WTPConfidence.MEDIUM,
    WTPFamily.FINANCIAL_DISCUSSION: WTPConfidence.MEDIUM,
    WTPFamily.PURCHASE_INTENT: WTPConfidence.MEDIUM,
    WTPFamily.VALUE_SIGNALS: WTPConfidence.LOW,
}

# Words that make a WTP quote show actual payment intent rather than a
# passing mention of pricing
PAYMENT_INTENT_WORDS: tuple[str, ...] = ("pay", "buy", "purchase", "worth", "money", "invest", "cost")


def _compile(patterns: list[str]) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


# Pain words used in a non-pain context: competitors, hypotheticals,
# questions about others, or problems that are already resolved
NEGATIVE_CONTEXT_PATTERNS = _compile([
    # Competition, not personal pain
    r"hate\s+(?:the\s+)?(?:competition|competitors?|rivals?)",
    r"frustrated\s+(?:with\s+)?(?:the\s+)?(?:competition|competitors?)",
    # General statements
    r"it'?s\s+(?:not\s+)?(?:terrible|awful|horrible)\s+(?:that|when)",
    r"(?:some|many|most)\s+people\s+(?:are\s+)?(?:frustrated|struggling)",
    # Asking about others
    r"(?:is\s+it|are\s+you)\s+(?:frustrated|struggling|having\s+trouble)",
    r"anyone\s+else\s+(?:frustrated|struggling|tired\s+of)",
    # Hypothetical or conditional
    r"(?:would|could|might)\s+be\s+(?:so\s+)?(?:frustrated|frustrating|terrible|awful|horrible)",
    r"if\s+(?:you|they|one)\s+(?:were|are)\s+(?:frustrated|struggling)",
    # Resolved in the past
    r"used\s+to\s+(?:be\s+)?(?:frustrated|struggle|struggling|hate)",
    r"was\s+(?:frustrated|struggling)\s+(?:but|until)",
    # Liked product with minor issues
    r"(?:love|like)\s+(?:it|this|the\s+app)\s+(?:but|even\s+though)",
])

# WTP vocabulary that does not signal purchase intent
WTP_EXCLUSION_PATTERNS = _compile([
    # Budget as an organizational term
    r"budget\s+(?:cut|meeting|review|planning|approval|constraint|limit)",
    r"(?:company|department|team)\s+budget",
    r"budget\s+(?:was|is|has\s+been)\s+(?:cut|reduced|slashed)",
    # Pricing complaints
    r"pricing\s+is\s+(?:crazy|insane|ridiculous|absurd)",
    r"(?:too\s+)?expensive\s+(?:for|to)",
    r"(?:can't|cannot)\s+afford",
    r"(?:price|cost)\s+(?:is\s+)?(?:too\s+)?(?:high|steep)",
    # ROI skepticism
    r"(?:not\s+)?(?:sure|certain)\s+(?:about\s+)?(?:the\s+)?roi",
    r"roi\s+(?:is|seems)\s+(?:unclear|questionable|not\s+clear)",
    # Investment as a general term
    r"(?:time|emotional)\s+investment",
    r"invest(?:ing)?\s+(?:in\s+)?(?:yourself|learning|skills)",
    # Subscription complaints
    r"(?:too\s+many|another)\s+subscription",
    r"subscription\s+fatigue",
    r"(?:cancel|cancelled|canceling)\s+(?:my\s+)?subscription",
    r"(?:not|isn't|wasn't)\s+worth\s+(?:it|the\s+money|paying)",
    # Refund requests
    r"(?:get|want|need|requesting?)\s+(?:my\s+)?(?:money\s+back|refund)",
    r"(?:ask|asking)\s+for\s+(?:a\s+)?refund",
    r"refund\s+(?:request|policy|please)",
    # Buyer's remorse
    r"regret\s+(?:buying|purchasing|paying|upgrading|subscribing)",
    r"(?:shouldn't|should\s+not)\s+have\s+(?:bought|paid|upgraded|subscribed)",
    r"(?:wish|wished)\s+i\s+(?:hadn't|had\s+not)\s+(?:bought|paid|upgraded)",
    # Doubting a past purchase
    r"(?:debating|wondering|questioning)\s+(?:if|whether)\s+(?:it\s+was|that\s+was)\s+worth",
    r"was\s+(?:it|that|this)\s+(?:really\s+)?worth\s+(?:it|the\s+money|paying)",
    r"(?:starting\s+to\s+)?(?:think|feel)\s+(?:like\s+)?i\s+(?:wasted|threw\s+away)\s+(?:my\s+)?money",
    # Past payment with negative sentiment
    r"(?:paid|spent|invested)\s+(?:for|on|in)\s+(?:this|it).*(?:disappointed|regret|waste|terrible|awful|useless)",
    r"(?:disappointed|regret|waste).*(?:paid|spent|invested)",
    r"(?:biggest|worst)\s+(?:waste|mistake)\s+of\s+(?:money|my\s+money)",
    r"(?:threw|throwing)\s+(?:away\s+)?money",
    r"money\s+(?:down\s+the\s+drain|wasted)",
])

# Substring clusters; neutral is the fallback when nothing matches
EMOTION_KEYWORDS: dict[Emotion, tuple[str, ...]] = {
    Emotion.FRUSTRATION: (
        "frustrated", "frustrating", "frustration", "annoying", "annoyed",
        "hate", "hated", "hating", "infuriating", "maddening", "aggravating",
        "fed up", "sick of", "tired of", "done with", "furious", "angry",
        "pissed", "irritated", "irritating", "can't stand", "ugh", "argh",
    ),
    Emotion.ANXIETY: (
        "worried", "worrying", "anxious", "anxiety", "stressed", "stressing",
        "nervous", "panicking", "panic", "scared", "afraid", "terrified",
        "overwhelming", "overwhelmed", "dread", "dreading", "fear", "fearful",
        "uncertain", "unsure", "paranoid", "freaking out",
    ),
    Emotion.DISAPPOINTMENT: (
        "disappointed", "disappointing", "disappointment", "letdown", "let down",
        "underwhelming", "underwhelmed", "expected more", "not what i hoped",
        "sad", "sadly", "unfortunate", "unfortunately", "regret", "regretted",
        "wish", "wished", "if only", "should have been", "could have been",
    ),
    Emotion.CONFUSION: (
        "confused", "confusing", "confusion", "don't understand", "can't figure",
        "lost", "no idea", "unclear", "makes no sense", "baffling", "baffled",
        "puzzled", "puzzling", "perplexed", "what am i doing wrong", "help",
        "how do i", "why does", "why is", "stuck", "clueless",
    ),
    Emotion.HOPE: (
        "hope", "hoping", "hopefully", "looking for", "searching for",
        "need a solution", "any recommendations", "any suggestions", "advice",
        "wish there was", "would love", "would be great", "dream", "ideal",
        "perfect would be", "if only there was", "someone should make",
    ),
}

# Source labels whose WTP language comes from real purchase context
HIGH_RELIABILITY_SOURCES = frozenset({"google_play", "app_store", "trustpilot"})
MEDIUM_RELIABILITY_SOURCES = frozenset({"hackernews", "hacker news", "askhn", "showhn"})
