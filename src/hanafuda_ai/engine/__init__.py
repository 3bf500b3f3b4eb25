"""Stateless decision core for the hanafuda computer opponent.

IMPORTANT: This package never mutates game state; the host owns the deck,
hands, field and captured piles and applies the decisions returned here.
"""

from .ai import AISpec, HanafudaAI, new_ai
from .errors import InvalidInputError
from .koikoi import decide_continue, estimate_completion_probability, evaluate_continue
from .opportunities import evaluate_opportunities
from .sage import decide_sage_or_shoubu
from .selector import select_capture, select_card
from .threats import analyze_threats
from .types import Card, CardCatalog, CardChoice, Opportunity, RoundScoreState, RuleSet, Threat
from .yaku import score_yaku, total_points, yaku_progress

__all__ = [
    "AISpec",
    "Card",
    "CardCatalog",
    "CardChoice",
    "HanafudaAI",
    "InvalidInputError",
    "Opportunity",
    "RoundScoreState",
    "RuleSet",
    "Threat",
    "analyze_threats",
    "decide_continue",
    "decide_sage_or_shoubu",
    "estimate_completion_probability",
    "evaluate_continue",
    "evaluate_opportunities",
    "new_ai",
    "score_yaku",
    "select_capture",
    "select_card",
    "total_points",
    "yaku_progress",
]
