from __future__ import annotations

import logging
from collections.abc import Sequence

from .errors import InvalidInputError
from .types import SageChoice, Tier

logger = logging.getLogger(__name__)

SUCCESS_RATE = 0.6
SUCCESS_RATE_PER_ROUND = 0.05
MAX_SUCCESS_RATE = 0.9
FAILURE_PENALTY_RATE = 0.5
GAIN_OVER_LOSS = 1.5


def _baseline(hand_value: int, diff: int) -> SageChoice:
    if diff > 100:
        return "stop"
    if diff < -150 and hand_value > 15:
        return "continue"
    if hand_value > 10 and diff > -50:
        return "stop"
    if hand_value < 8:
        return "cancel"
    if hand_value <= 10:
        return "continue"
    return "stop" if diff > -30 else "continue"


def _strategic(hand_value: int, diff: int, rounds_remaining: int) -> SageChoice:
    if diff > 120 and rounds_remaining <= 3:
        return "stop"
    if diff < -100 and rounds_remaining > 4 and hand_value > 12:
        return "continue"

    # More rounds left means a failed gamble can still be won back.
    success = min(MAX_SUCCESS_RATE, SUCCESS_RATE + SUCCESS_RATE_PER_ROUND * max(rounds_remaining, 0))
    gain = hand_value * success
    loss = hand_value * FAILURE_PENALTY_RATE
    if gain > loss * GAIN_OVER_LOSS:
        return "continue"
    return _baseline(hand_value, diff)


def decide_sage_or_shoubu(
    hand_value_estimate: int,
    own_score: int,
    opponent_scores: Sequence[int],
    round_index: int,
    total_rounds: int,
    tier: Tier = "baseline",
) -> SageChoice:
    """Three-way choice for the hachi-hachi variant: continue (sage), stop (shoubu) or cancel."""
    if not opponent_scores:
        raise InvalidInputError("At least one opponent score is required")

    diff = own_score - max(opponent_scores)
    if tier == "baseline":
        choice = _baseline(hand_value_estimate, diff)
    elif tier == "strategic":
        choice = _strategic(hand_value_estimate, diff, total_rounds - round_index)
    else:
        raise InvalidInputError(f"Unknown decision tier: {tier}")

    logger.debug("Sage decision (%s): value=%d diff=%d -> %s", tier, hand_value_estimate, diff, choice)
    return choice
