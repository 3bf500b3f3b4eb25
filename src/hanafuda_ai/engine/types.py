from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

CardType = Literal["bright", "animal", "ribbon", "chaff"]
RibbonColor = Literal["red", "blue"]
SpecialTag = Literal[
    "crane",
    "curtain",
    "moon",
    "rain_man",
    "phoenix",
    "boar",
    "deer",
    "butterflies",
    "sake_cup",
    "poetry_ribbon",
]

YakuFamily = Literal[
    "brights",
    "poetry_ribbons",
    "blue_ribbons",
    "ino_shika_cho",
    "ribbons",
    "animals",
    "chaff",
    "viewing_sake",
]
ViewingSakeMode = Literal["always", "never", "require_other"]

Tier = Literal["baseline", "strategic"]
SageChoice = Literal["continue", "stop", "cancel"]

# Lowest first: the card we are happiest to leave on the field.
DISCARD_ORDER: dict[CardType, int] = {"chaff": 1, "ribbon": 2, "animal": 3, "bright": 4}

GENERIC_FAMILIES: frozenset[YakuFamily] = frozenset({"ribbons", "animals", "chaff"})


@dataclass(frozen=True)
class Card:
    id: int
    month: int
    type: CardType
    name: str
    points: int
    ribbon_color: RibbonColor | None = None
    special: SpecialTag | None = None


@dataclass(frozen=True)
class CardCatalog:
    """Immutable 48-card deck used by the engine."""

    cards: dict[int, Card]

    def get(self, card_id: int) -> Card:
        return self.cards[card_id]

    def all_cards(self) -> Sequence[Card]:
        return list(self.cards.values())


@dataclass(frozen=True)
class YakuDefinition:
    name: str
    family: YakuFamily
    minimum: int
    points: int
    group: str | None = None
    types: frozenset[CardType] = frozenset()
    tags: frozenset[SpecialTag] = frozenset()
    ribbon_colors: frozenset[RibbonColor] = frozenset()
    exclude_tags: frozenset[SpecialTag] = frozenset()
    require_tags: frozenset[SpecialTag] = frozenset()
    extra_per_card: int = 0
    track_from: int = 1

    def qualifies(self, card: Card) -> bool:
        if card.special is not None and card.special in self.exclude_tags:
            return False
        if card.type in self.types:
            return True
        if card.special is not None and card.special in self.tags:
            return True
        return card.ribbon_color is not None and card.ribbon_color in self.ribbon_colors

    def points_at(self, count: int) -> int:
        return self.points + max(0, count - self.minimum) * self.extra_per_card

    @property
    def count_scaled(self) -> bool:
        return self.extra_per_card > 0


@dataclass(frozen=True)
class RuleSet:
    name: str
    viewing_sake: ViewingSakeMode
    yaku: tuple[YakuDefinition, ...]

    def families(self) -> tuple[YakuFamily, ...]:
        seen: list[YakuFamily] = []
        for y in self.yaku:
            if y.family not in seen:
                seen.append(y.family)
        return tuple(seen)


@dataclass(frozen=True)
class ScoredYaku:
    name: str
    family: YakuFamily
    points: int
    cards: tuple[Card, ...]


@dataclass(frozen=True)
class YakuProgress:
    name: str
    current: int
    minimum: int
    possible: bool


@dataclass(frozen=True)
class Threat:
    yaku_name: str
    family: YakuFamily
    current_count: int
    needed_count: int
    points: int
    priority: float
    blocking_cards: tuple[Card, ...]
    eligible_outstanding: int


@dataclass(frozen=True)
class Opportunity:
    yaku_name: str
    family: YakuFamily
    current_count: int
    accessible_count: int
    points: int
    priority: float
    can_match: bool
    target_cards: tuple[Card, ...]


@dataclass(frozen=True)
class CardChoice:
    card: Card
    matched_field_card: Card | None
    score: float
    rationale: tuple[str, ...]


@dataclass(frozen=True)
class RoundScoreState:
    round_score: int
    ai_total_score: int
    player_total_score: int
    deck_remaining: int

    @property
    def lead_if_stopped(self) -> int:
        return self.ai_total_score + self.round_score - self.player_total_score


@dataclass(frozen=True)
class ContinueVerdict:
    continue_play: bool
    reason: str
    probability: float | None = None
