from __future__ import annotations

import logging
from collections.abc import Sequence

from .errors import InvalidInputError, require_hand, validate_zones
from .opportunities import evaluate_opportunities
from .threats import analyze_threats
from .types import (
    DISCARD_ORDER,
    GENERIC_FAMILIES,
    Card,
    CardCatalog,
    CardChoice,
    CardType,
    Opportunity,
    RuleSet,
    Threat,
    Tier,
    YakuFamily,
)

logger = logging.getLogger(__name__)

BLOCK_WEIGHT = 2.0
ADVANCE_WEIGHT = 1.0
GENERIC_MULTIPLIER = 0.25
NO_MATCH_SCORE = 0.0

# Baseline tier: how much we want to play / take a card of each type.
BASELINE_TYPE_VALUES: dict[CardType, int] = {"bright": 10, "animal": 7, "ribbon": 5, "chaff": 2}


def _family_weight(family: YakuFamily) -> float:
    return GENERIC_MULTIPLIER if family in GENERIC_FAMILIES else 1.0


def _matches(card: Card, field: Sequence[Card]) -> list[Card]:
    return [f for f in field if f.month == card.month]


def score_match(
    match: Card, threats: Sequence[Threat], opportunities: Sequence[Opportunity]
) -> tuple[float, list[str]]:
    """Value of taking ``match`` off the field: its points plus block and advance bonuses."""
    score = float(match.points)
    why = [f"{match.points}pt card"]

    for t in threats:
        if any(b.id == match.id for b in t.blocking_cards):
            score += t.priority * BLOCK_WEIGHT * _family_weight(t.family)
            why.append(f"blocks {t.yaku_name} (priority {t.priority:.1f})")

    for o in opportunities:
        if not o.can_match:
            continue
        if any(c.id == match.id for c in o.target_cards):
            score += o.priority * ADVANCE_WEIGHT * _family_weight(o.family)
            why.append(f"advances {o.yaku_name} (priority {o.priority:.1f})")

    return score, why


def _best_match(
    matches: Sequence[Card], threats: Sequence[Threat], opportunities: Sequence[Opportunity]
) -> tuple[Card, float, list[str]]:
    best_score, best_why = score_match(matches[0], threats, opportunities)
    best = matches[0]
    for m in matches[1:]:
        score, why = score_match(m, threats, opportunities)
        if score > best_score:
            best, best_score, best_why = m, score, why
    return best, best_score, best_why


def _baseline_best_match(matches: Sequence[Card]) -> Card:
    best = matches[0]
    for m in matches[1:]:
        if BASELINE_TYPE_VALUES[m.type] > BASELINE_TYPE_VALUES[best.type]:
            best = m
    return best


def discard_choice(hand: Sequence[Card]) -> CardChoice:
    """Nothing matches: place the lowest-value card on the field."""
    lowest = hand[0]
    for c in hand[1:]:
        if DISCARD_ORDER[c.type] < DISCARD_ORDER[lowest.type]:
            lowest = c
    return CardChoice(
        card=lowest,
        matched_field_card=None,
        score=NO_MATCH_SCORE,
        rationale=("no match - goes to field", f"lowest value ({lowest.type})"),
    )


def _strategic_choice(
    hand: Sequence[Card],
    captured: Sequence[Card],
    field: Sequence[Card],
    opponent_captured: Sequence[Card],
    ruleset: RuleSet,
    catalog: CardCatalog,
) -> CardChoice:
    threats = analyze_threats(opponent_captured, captured, ruleset=ruleset, catalog=catalog)
    opportunities = evaluate_opportunities(
        hand, captured, field, opponent_captured, ruleset=ruleset, catalog=catalog
    )

    best: CardChoice | None = None
    for card in hand:
        matches = _matches(card, field)
        if not matches:
            continue
        match, score, why = _best_match(matches, threats, opportunities)
        if best is None or score > best.score:
            best = CardChoice(card=card, matched_field_card=match, score=score, rationale=tuple(why))

    if best is None:
        return discard_choice(hand)
    return best


def _baseline_choice(hand: Sequence[Card], field: Sequence[Card]) -> CardChoice:
    best: CardChoice | None = None
    for card in hand:
        matches = _matches(card, field)
        if not matches:
            continue
        score = float(BASELINE_TYPE_VALUES[card.type] + 2 * len(matches))
        if best is None or score > best.score:
            best = CardChoice(
                card=card,
                matched_field_card=_baseline_best_match(matches),
                score=score,
                rationale=(f"{card.type} with {len(matches)} match(es)",),
            )

    if best is None:
        return discard_choice(hand)
    return best


def select_card(
    hand: Sequence[Card],
    captured: Sequence[Card],
    field: Sequence[Card],
    opponent_captured: Sequence[Card],
    *,
    ruleset: RuleSet,
    catalog: CardCatalog,
    tier: Tier = "strategic",
) -> CardChoice:
    """Pick the hand card to play and, when it matches, the field card it takes.

    Ties keep the first card seen in ``hand`` (and in ``field`` for the
    capture target), so identical inputs always give identical choices.
    """
    require_hand(hand)
    validate_zones(catalog, hand=hand, captured=captured, field=field, opponent_captured=opponent_captured)

    if tier == "strategic":
        choice = _strategic_choice(hand, captured, field, opponent_captured, ruleset, catalog)
    elif tier == "baseline":
        choice = _baseline_choice(hand, field)
    else:
        raise InvalidInputError(f"Unknown selection tier: {tier}")

    target = choice.matched_field_card.name if choice.matched_field_card else "field"
    logger.debug("Play %s -> %s (%.2f): %s", choice.card.name, target, choice.score, "; ".join(choice.rationale))
    return choice


def select_capture(
    card: Card,
    hand: Sequence[Card],
    captured: Sequence[Card],
    field: Sequence[Card],
    opponent_captured: Sequence[Card],
    *,
    ruleset: RuleSet,
    catalog: CardCatalog,
    tier: Tier = "strategic",
) -> Card | None:
    """Choose which field card a card drawn from the deck takes, or None if it has no match."""
    validate_zones(
        catalog, drawn=[card], hand=hand, captured=captured, field=field, opponent_captured=opponent_captured
    )
    matches = _matches(card, field)
    if not matches:
        return None
    if len(matches) == 1:
        return matches[0]

    if tier == "baseline":
        return _baseline_best_match(matches)
    if tier != "strategic":
        raise InvalidInputError(f"Unknown selection tier: {tier}")

    threats = analyze_threats(opponent_captured, captured, ruleset=ruleset, catalog=catalog)
    opportunities = evaluate_opportunities(
        [*hand, card], captured, field, opponent_captured, ruleset=ruleset, catalog=catalog
    )
    match, score, why = _best_match(matches, threats, opportunities)
    logger.debug("Drawn %s takes %s (%.2f): %s", card.name, match.name, score, "; ".join(why))
    return match
