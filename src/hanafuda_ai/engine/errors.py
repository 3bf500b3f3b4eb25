from __future__ import annotations

from collections.abc import Sequence

from .types import Card, CardCatalog


class InvalidInputError(ValueError):
    """Raised when the host hands the engine a state it cannot reason about."""


def require_cards(cards: Sequence[Card], zone: str, catalog: CardCatalog) -> None:
    for c in cards:
        if not isinstance(c, Card):
            raise InvalidInputError(f"{zone} contains a non-card value: {c!r}")
        if catalog.cards.get(c.id) != c:
            raise InvalidInputError(f"{zone} contains a card not in the catalog: {c!r}")


def validate_zones(catalog: CardCatalog, **zones: Sequence[Card]) -> None:
    """Every card must be a catalog Card and sit in exactly one zone."""
    seen: dict[int, str] = {}
    for zone, cards in zones.items():
        require_cards(cards, zone, catalog)
        for c in cards:
            prev = seen.get(c.id)
            if prev is not None:
                raise InvalidInputError(f"Card {c.id} ({c.name}) is in both {prev} and {zone}")
            seen[c.id] = zone


def require_hand(hand: Sequence[Card]) -> None:
    if not hand:
        raise InvalidInputError("Hand is empty")
