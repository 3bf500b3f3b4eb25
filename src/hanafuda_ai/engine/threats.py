from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from .errors import validate_zones
from .types import Card, CardCatalog, RuleSet, Threat, YakuFamily
from .yaku import measure

logger = logging.getLogger(__name__)


def analyze_threats(
    opponent_captured: Sequence[Card],
    ai_captured: Sequence[Card],
    *,
    ruleset: RuleSet,
    catalog: CardCatalog,
) -> list[Threat]:
    """Score how close the opponent is to each yaku family.

    Cards the AI already captured are out of circulation, so a yaku the
    opponent can no longer finish raises no threat. At most one threat is
    kept per family (the most urgent tier, carrying the blocking cards of
    every live yaku in that family), and the result is ordered by
    descending priority with ties left in ruleset order.
    """
    validate_zones(catalog, opponent_captured=opponent_captured, ai_captured=ai_captured)
    if not opponent_captured:
        return []

    best: dict[YakuFamily, Threat] = {}
    for defn in ruleset.yaku:
        if defn.family == "viewing_sake" and ruleset.viewing_sake == "never":
            continue
        p = measure(defn, opponent_captured, ai_captured, catalog)
        if p.current < defn.track_from:
            continue

        if p.complete:
            # Already scored: only count-scaled yaku keep growing.
            if not defn.count_scaled or not p.outstanding:
                continue
            needed = 1
            points = defn.points_at(p.current + 1)
            blocking = p.outstanding
        else:
            if not p.completable:
                continue
            needed = p.needed
            points = defn.points_at(p.current + needed)
            blocking = p.blocking

        threat = Threat(
            yaku_name=defn.name,
            family=defn.family,
            current_count=p.current,
            needed_count=needed,
            points=points,
            priority=points / needed,
            blocking_cards=blocking,
            eligible_outstanding=len(p.outstanding),
        )
        prev = best.get(defn.family)
        if prev is None:
            best[defn.family] = threat
            continue
        # The most urgent yaku ranks the family; every live yaku in it still blocks.
        ranked = threat if threat.priority > prev.priority else prev
        blocking = {c.id: c for c in (*prev.blocking_cards, *threat.blocking_cards)}
        best[defn.family] = replace(ranked, blocking_cards=tuple(blocking[i] for i in sorted(blocking)))

    threats = sorted(best.values(), key=lambda t: -t.priority)
    if threats:
        logger.debug(
            "Opponent threats: %s",
            ", ".join(f"{t.yaku_name} needs {t.needed_count} ({t.priority:.1f})" for t in threats),
        )
    return threats
