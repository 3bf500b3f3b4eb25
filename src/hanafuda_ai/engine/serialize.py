from __future__ import annotations


from .types import Card, CardChoice, ContinueVerdict, Opportunity, Threat


def card_to_dict(c: Card | None) -> dict[str, object] | None:
    if c is None:
        return None
    return {
        "id": c.id,
        "month": c.month,
        "type": c.type,
        "name": c.name,
        "points": c.points,
        "ribbon_color": c.ribbon_color,
        "special": c.special,
    }


def choice_to_dict(choice: CardChoice) -> dict[str, object]:
    return {
        "card": card_to_dict(choice.card),
        "matched_field_card": card_to_dict(choice.matched_field_card),
        "score": choice.score,
        "rationale": list(choice.rationale),
    }


def threat_to_dict(t: Threat) -> dict[str, object]:
    return {
        "yaku": t.yaku_name,
        "family": t.family,
        "current": t.current_count,
        "needed": t.needed_count,
        "points": t.points,
        "priority": t.priority,
        "blocking_card_ids": sorted(c.id for c in t.blocking_cards),
    }


def opportunity_to_dict(o: Opportunity) -> dict[str, object]:
    return {
        "yaku": o.yaku_name,
        "family": o.family,
        "current": o.current_count,
        "accessible": o.accessible_count,
        "points": o.points,
        "priority": o.priority,
        "can_match": o.can_match,
        "target_card_ids": sorted(c.id for c in o.target_cards),
    }


def verdict_to_dict(v: ContinueVerdict) -> dict[str, object]:
    """Return a JSON-serializable record of a koi-koi / shobu verdict."""
    return {
        "continue": v.continue_play,
        "reason": v.reason,
        "probability": v.probability,
    }
