"""Koi-koi (continue) or shobu (stop) after the AI completes a yaku.

Deterministic gates run first; the injected random source is only sampled
when neither gate decides.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence

from .errors import InvalidInputError, validate_zones
from .threats import analyze_threats
from .types import (
    GENERIC_FAMILIES,
    Card,
    CardCatalog,
    ContinueVerdict,
    RoundScoreState,
    RuleSet,
    ScoredYaku,
    Threat,
    Tier,
)

logger = logging.getLogger(__name__)

CARDS_DRAWN_PER_TURN = 2

# Chance per opponent turn of landing what the threat still needs.
PER_TURN_RATE = {1: 0.33, 2: 0.12}
LONG_SHOT_RATE = 0.04
WIDE_CATEGORY = 10
WIDE_FACTOR = 1.2
SPECIFIC_FACTOR = 0.8
MAX_COMPLETION = 0.95

HARD_STOP_PROBABILITY = 0.6
HARD_STOP_MAX_NEEDED = 2
MATERIAL_DOWNSIDE = 3

BASE_CONTINUE = 0.7
LEAD_PENALTY = 0.04
LEAD_CAP = 10
THREAT_PENALTY = 0.5
LOW_DECK = 10
LOW_DECK_PENALTY = 0.15
GROWING_YAKU_BONUS = 0.1
MIN_CONTINUE = 0.05
MAX_CONTINUE = 0.9

COMFORTABLE_LEAD = 5


def remaining_turns(deck_remaining: int) -> int:
    return max(1, math.ceil(deck_remaining / CARDS_DRAWN_PER_TURN))


def estimate_completion_probability(threat: Threat, deck_remaining: int) -> float:
    """Rough chance the opponent finishes ``threat`` before the deck runs out."""
    rate = PER_TURN_RATE.get(threat.needed_count, LONG_SHOT_RATE)
    p = 1.0 - (1.0 - rate) ** remaining_turns(deck_remaining)
    if threat.eligible_outstanding >= WIDE_CATEGORY:
        p *= WIDE_FACTOR
    elif threat.eligible_outstanding <= threat.needed_count:
        p *= SPECIFIC_FACTOR
    return min(max(p, 0.0), MAX_COMPLETION)


def _round_score_penalty(round_score: int) -> float:
    if round_score >= 10:
        return 0.35
    if round_score >= 7:
        return 0.2
    if round_score >= 4:
        return 0.1
    return 0.0


def _has_growing_yaku(current_yaku: Sequence[ScoredYaku]) -> bool:
    return any(y.family in GENERIC_FAMILIES for y in current_yaku)


def strategic_continue_probability(
    current_yaku: Sequence[ScoredYaku], state: RoundScoreState, threat_probability: float
) -> float:
    lead = state.lead_if_stopped
    p = BASE_CONTINUE
    p -= LEAD_PENALTY * min(lead, LEAD_CAP)
    p -= _round_score_penalty(state.round_score)
    p -= THREAT_PENALTY * threat_probability
    if state.deck_remaining < LOW_DECK:
        p -= LOW_DECK_PENALTY
    if _has_growing_yaku(current_yaku):
        p += GROWING_YAKU_BONUS
    return min(max(p, MIN_CONTINUE), MAX_CONTINUE)


def baseline_continue_probability(
    current_yaku: Sequence[ScoredYaku], state: RoundScoreState, threats: Sequence[Threat]
) -> float:
    score = state.round_score
    lead = state.lead_if_stopped

    if lead >= COMFORTABLE_LEAD and score >= 4:
        return 0.15
    if score >= 10 and lead >= 3:
        return 0.1
    high_threat = bool(threats) and threats[0].priority > 5
    if high_threat and score >= 6 and lead < COMFORTABLE_LEAD:
        return 0.2
    if state.deck_remaining < LOW_DECK and score >= 4 and lead >= 2:
        return 0.3
    if lead <= 3 and score >= 3:
        return 0.6
    if score >= 7:
        return 0.25
    if score >= 4:
        return 0.6 if _has_growing_yaku(current_yaku) else 0.4
    return 0.8


def evaluate_continue(
    current_yaku: Sequence[ScoredYaku],
    state: RoundScoreState,
    ai_captured: Sequence[Card],
    opponent_captured: Sequence[Card],
    *,
    ruleset: RuleSet,
    catalog: CardCatalog,
    rng: random.Random,
    tier: Tier = "strategic",
) -> ContinueVerdict:
    """Decide koi-koi (True) or shobu (False), with the reason behind it.

    The host only asks after the AI completed at least one yaku.
    """
    if tier not in ("strategic", "baseline"):
        raise InvalidInputError(f"Unknown decision tier: {tier}")
    validate_zones(catalog, ai_captured=ai_captured, opponent_captured=opponent_captured)

    lead = state.lead_if_stopped
    if lead <= 0:
        verdict = ContinueVerdict(True, f"must continue: stopping leaves us behind by {-lead}")
        logger.debug("Koi-koi: %s", verdict.reason)
        return verdict

    threats = analyze_threats(opponent_captured, ai_captured, ruleset=ruleset, catalog=catalog)
    odds = [(t, estimate_completion_probability(t, state.deck_remaining)) for t in threats]

    if tier == "strategic":
        for t, p in odds:
            downside = 2 * t.points - lead
            if t.needed_count <= HARD_STOP_MAX_NEEDED and p > HARD_STOP_PROBABILITY and downside > MATERIAL_DOWNSIDE:
                verdict = ContinueVerdict(
                    False, f"stop: {t.yaku_name} needs {t.needed_count} at {p:.2f}, downside {downside}"
                )
                logger.debug("Shobu: %s", verdict.reason)
                return verdict
        threat_p = max((p for _, p in odds), default=0.0)
        prob = strategic_continue_probability(current_yaku, state, threat_p)
    else:
        prob = baseline_continue_probability(current_yaku, state, threats)

    keep_going = rng.random() < prob
    verdict = ContinueVerdict(keep_going, f"sampled at {prob:.2f} with lead {lead}", prob)
    logger.debug("%s: %s", "Koi-koi" if keep_going else "Shobu", verdict.reason)
    return verdict


def decide_continue(
    current_yaku: Sequence[ScoredYaku],
    state: RoundScoreState,
    ai_captured: Sequence[Card],
    opponent_captured: Sequence[Card],
    *,
    ruleset: RuleSet,
    catalog: CardCatalog,
    rng: random.Random,
    tier: Tier = "strategic",
) -> bool:
    return evaluate_continue(
        current_yaku,
        state,
        ai_captured,
        opponent_captured,
        ruleset=ruleset,
        catalog=catalog,
        rng=rng,
        tier=tier,
    ).continue_play
