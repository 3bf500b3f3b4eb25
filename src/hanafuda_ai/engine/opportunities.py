from __future__ import annotations

import logging
from collections.abc import Sequence

from .errors import validate_zones
from .types import Card, CardCatalog, Opportunity, RuleSet, YakuFamily
from .yaku import measure

logger = logging.getLogger(__name__)


def evaluate_opportunities(
    hand: Sequence[Card],
    captured: Sequence[Card],
    field: Sequence[Card],
    opponent_captured: Sequence[Card],
    *,
    ruleset: RuleSet,
    catalog: CardCatalog,
) -> list[Opportunity]:
    """Find the yaku the AI can still build from its captured, hand and field cards.

    Priority scales with the share of the yaku already captured, since only
    banked cards are safe from the opponent.
    """
    validate_zones(catalog, hand=hand, captured=captured, field=field, opponent_captured=opponent_captured)
    hand_months = {c.month for c in hand}

    best: dict[YakuFamily, Opportunity] = {}
    for defn in ruleset.yaku:
        if defn.family == "viewing_sake" and ruleset.viewing_sake == "never":
            continue
        p = measure(defn, captured, opponent_captured, catalog)
        if p.current < 1:
            continue
        if p.complete and not defn.count_scaled:
            continue
        if not p.complete and not p.completable:
            continue

        in_hand = [c for c in hand if defn.qualifies(c)]
        reachable = [c for c in field if defn.qualifies(c) and c.month in hand_months]
        accessible = p.current + len(in_hand) + len(reachable)
        if accessible < defn.track_from:
            continue

        points = defn.points_at(max(accessible, defn.minimum))
        opp = Opportunity(
            yaku_name=defn.name,
            family=defn.family,
            current_count=p.current,
            accessible_count=accessible,
            points=points,
            priority=points * p.current / defn.minimum,
            can_match=bool(reachable),
            target_cards=p.outstanding,
        )
        prev = best.get(defn.family)
        if prev is None or opp.priority > prev.priority:
            best[defn.family] = opp

    opportunities = sorted(best.values(), key=lambda o: -o.priority)
    if opportunities:
        logger.debug(
            "AI opportunities: %s",
            ", ".join(f"{o.yaku_name} {o.current_count}/{o.accessible_count}" for o in opportunities),
        )
    return opportunities
