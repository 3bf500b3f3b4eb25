from __future__ import annotations

import random

from hanafuda_ai.engine.opportunities import evaluate_opportunities
from hanafuda_ai.engine.types import Card, CardCatalog
from hanafuda_ai.paths import get_paths
from hanafuda_ai.services.content import ContentService


def _load():
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_catalog(), content.load_rulesets()["standard"]


def _cards(catalog: CardCatalog, *ids: int) -> list[Card]:
    return [catalog.get(i) for i in ids]


def _by_family(opps):
    return {o.family: o for o in opps}


def test_reachable_blue_ribbon() -> None:
    catalog, rs = _load()
    opps = evaluate_opportunities(
        _cards(catalog, 39), _cards(catalog, 22, 34), _cards(catalog, 38), [], ruleset=rs, catalog=catalog
    )

    blue = _by_family(opps)["blue_ribbons"]
    assert blue.current_count == 2
    assert blue.accessible_count == 3
    assert blue.points == 6
    assert blue.priority == 4.0
    assert blue.can_match


def test_field_card_without_a_hand_match_is_not_reachable() -> None:
    catalog, rs = _load()
    opps = evaluate_opportunities(
        _cards(catalog, 3), _cards(catalog, 22, 34), _cards(catalog, 38), [], ruleset=rs, catalog=catalog
    )
    assert not _by_family(opps)["blue_ribbons"].can_match


def test_opponent_holding_a_needed_card_kills_the_opportunity() -> None:
    catalog, rs = _load()
    opps = evaluate_opportunities(
        _cards(catalog, 39), _cards(catalog, 22, 34), _cards(catalog, 40), _cards(catalog, 38),
        ruleset=rs,
        catalog=catalog,
    )
    assert "blue_ribbons" not in _by_family(opps)


def test_nothing_captured_means_no_opportunities() -> None:
    catalog, rs = _load()
    opps = evaluate_opportunities(
        _cards(catalog, 1, 9, 22), [], _cards(catalog, 3, 11, 24), [], ruleset=rs, catalog=catalog
    )
    assert opps == []


def test_priority_follows_banked_cards() -> None:
    catalog, rs = _load()
    one = evaluate_opportunities(
        _cards(catalog, 34, 39), _cards(catalog, 22), _cards(catalog, 38), [], ruleset=rs, catalog=catalog
    )
    two = evaluate_opportunities(
        _cards(catalog, 39), _cards(catalog, 22, 34), _cards(catalog, 38), [], ruleset=rs, catalog=catalog
    )
    assert _by_family(one)["blue_ribbons"].priority < _by_family(two)["blue_ribbons"].priority


def test_can_match_implies_a_reachable_field_card() -> None:
    catalog, rs = _load()
    for seed in range(40):
        ids = list(range(1, 49))
        random.Random(seed).shuffle(ids)
        hand = _cards(catalog, *ids[0:8])
        field = _cards(catalog, *ids[8:16])
        captured = _cards(catalog, *ids[16:30])
        opponent = _cards(catalog, *ids[30:44])
        hand_months = {c.month for c in hand}
        field_ids = {c.id for c in field}

        for o in evaluate_opportunities(hand, captured, field, opponent, ruleset=rs, catalog=catalog):
            if o.can_match:
                assert any(c.id in field_ids and c.month in hand_months for c in o.target_cards), (seed, o)
