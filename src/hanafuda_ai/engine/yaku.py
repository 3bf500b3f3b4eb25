"""Yaku scoring and progress tracking.

Every yaku is a ``YakuDefinition`` record; the single ``measure`` evaluator
below reads its declarative features, so both shipped rulesets (and any a host
loads from data) share one code path for scoring, threats and opportunities.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .types import Card, CardCatalog, RuleSet, ScoredYaku, YakuDefinition, YakuProgress


@dataclass(frozen=True)
class Progress:
    current: int
    needed: int
    outstanding: tuple[Card, ...]
    blocking: tuple[Card, ...]
    completable: bool

    @property
    def complete(self) -> bool:
        return self.needed == 0


def _ids(cards: Iterable[Card]) -> set[int]:
    return {c.id for c in cards}


def measure(
    defn: YakuDefinition,
    held: Sequence[Card],
    removed: Sequence[Card],
    catalog: CardCatalog,
) -> Progress:
    """Progress of ``held`` toward ``defn`` when ``removed`` can no longer be drawn."""
    held_ids = _ids(held)
    gone = held_ids | _ids(removed)

    current = sum(1 for c in held if defn.qualifies(c))
    held_tags = {c.special for c in held if c.special is not None}
    missing_required = [t for t in sorted(defn.require_tags) if t not in held_tags]

    short = defn.minimum - current
    needed = max(short, len(missing_required), 0)

    outstanding = tuple(c for c in catalog.all_cards() if defn.qualifies(c) and c.id not in gone)
    required_cards = [c for c in catalog.all_cards() if c.special in missing_required]
    required_available = all(c.id not in gone for c in required_cards)
    completable = required_available and len(outstanding) >= needed

    if missing_required and short <= len(missing_required):
        blocking = tuple(c for c in required_cards if c.id not in gone)
    else:
        blocking = outstanding

    return Progress(
        current=current,
        needed=needed,
        outstanding=outstanding,
        blocking=blocking,
        completable=completable,
    )


def score_yaku(captured: Sequence[Card], ruleset: RuleSet) -> list[ScoredYaku]:
    """Return every completed yaku in ``captured``, in ruleset order."""
    completed: list[ScoredYaku] = []
    best_in_group: dict[str, ScoredYaku] = {}

    for defn in ruleset.yaku:
        qualifying = tuple(c for c in captured if defn.qualifies(c))
        tags = {c.special for c in captured if c.special is not None}
        if len(qualifying) < defn.minimum or not defn.require_tags <= tags:
            continue
        scored = ScoredYaku(
            name=defn.name,
            family=defn.family,
            points=defn.points_at(len(qualifying)),
            cards=qualifying,
        )
        if defn.group is None:
            completed.append(scored)
            continue
        prev = best_in_group.get(defn.group)
        if prev is None:
            best_in_group[defn.group] = scored
            completed.append(scored)
        elif scored.points > prev.points:
            completed[completed.index(prev)] = scored
            best_in_group[defn.group] = scored

    if ruleset.viewing_sake == "never":
        completed = [y for y in completed if y.family != "viewing_sake"]
    elif ruleset.viewing_sake == "require_other":
        if not any(y.family != "viewing_sake" for y in completed):
            completed = []
    return completed


def total_points(yaku: Iterable[ScoredYaku]) -> int:
    return sum(y.points for y in yaku)


def yaku_progress(
    captured: Sequence[Card],
    opponent_captured: Sequence[Card],
    ruleset: RuleSet,
    catalog: CardCatalog,
) -> list[YakuProgress]:
    """Started but unfinished yaku, flagged with whether they can still be made."""
    out: list[YakuProgress] = []
    for defn in ruleset.yaku:
        if ruleset.viewing_sake == "never" and defn.family == "viewing_sake":
            continue
        p = measure(defn, captured, opponent_captured, catalog)
        if p.current == 0 or p.complete:
            continue
        out.append(
            YakuProgress(name=defn.name, current=p.current, minimum=defn.minimum, possible=p.completable)
        )
    return out
