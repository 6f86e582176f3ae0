"""Pain Verdict - score pain in short texts and turn research into a viability verdict."""

from .aggregator import summarize
from .calibration import calibrate
from .pain_scorer import analyze_records, score_text
from .praise_filter import PraiseFilter
from .resonance import calculate_theme_resonance
from .viability import calculate_viability

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "analyze_records",
    "calculate_theme_resonance",
    "calculate_viability",
    "calibrate",
    "PraiseFilter",
    "score_text",
    "summarize",
]
