from __future__ import annotations

import random

import pytest

from hanafuda_ai.engine.errors import InvalidInputError
from hanafuda_ai.engine.koikoi import (
    decide_continue,
    estimate_completion_probability,
    evaluate_continue,
    remaining_turns,
)
from hanafuda_ai.engine.types import Card, CardCatalog, RoundScoreState, Threat
from hanafuda_ai.engine.yaku import score_yaku
from hanafuda_ai.paths import get_paths
from hanafuda_ai.services.content import ContentService


class NoSampling(random.Random):
    def random(self) -> float:
        raise AssertionError("random source sampled behind a deterministic gate")


class Fixed(random.Random):
    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def _load():
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_catalog(), content.load_rulesets()["standard"]


def _cards(catalog: CardCatalog, *ids: int) -> list[Card]:
    return [catalog.get(i) for i in ids]


def _threat(needed: int, eligible: int) -> Threat:
    return Threat(
        yaku_name="Test",
        family="chaff",
        current_count=5,
        needed_count=needed,
        points=3,
        priority=3 / needed,
        blocking_cards=(),
        eligible_outstanding=eligible,
    )


@pytest.mark.parametrize("tier", ["baseline", "strategic"])
def test_must_continue_when_stopping_loses(tier: str) -> None:
    catalog, rs = _load()
    ai = _cards(catalog, 2, 6, 10)
    opponent = _cards(catalog, 1, 9, 29, 22, 34, 25, 37)
    yaku = score_yaku(ai, rs)

    for state in (RoundScoreState(5, 0, 10, 20), RoundScoreState(5, 5, 10, 2)):
        verdict = evaluate_continue(yaku, state, ai, opponent, ruleset=rs, catalog=catalog, rng=NoSampling(), tier=tier)
        assert verdict.continue_play
        assert verdict.reason.startswith("must continue")


def test_hard_stop_against_blue_ribbons_one_away() -> None:
    catalog, rs = _load()
    ai = _cards(catalog, 2, 6, 10)
    opponent = _cards(catalog, 22, 34)
    state = RoundScoreState(round_score=4, ai_total_score=0, player_total_score=2, deck_remaining=10)

    result = decide_continue(score_yaku(ai, rs), state, ai, opponent, ruleset=rs, catalog=catalog, rng=NoSampling())
    assert result is False


def test_baseline_tier_has_no_hard_stop() -> None:
    catalog, rs = _load()
    ai = _cards(catalog, 2, 6, 10)
    opponent = _cards(catalog, 22, 34)
    state = RoundScoreState(4, 0, 2, 10)

    verdict = evaluate_continue(
        score_yaku(ai, rs), state, ai, opponent, ruleset=rs, catalog=catalog, rng=Fixed(0.0), tier="baseline"
    )
    assert verdict.continue_play
    assert verdict.probability == 0.6


def test_probabilistic_zone_samples_against_computed_probability() -> None:
    catalog, rs = _load()
    ai = _cards(catalog, 9, 33)
    yaku = score_yaku(ai, rs)
    state = RoundScoreState(round_score=3, ai_total_score=10, player_total_score=12, deck_remaining=20)

    low = evaluate_continue(yaku, state, ai, [], ruleset=rs, catalog=catalog, rng=Fixed(0.65))
    assert low.continue_play
    assert low.probability == pytest.approx(0.66)

    high = evaluate_continue(yaku, state, ai, [], ruleset=rs, catalog=catalog, rng=Fixed(0.67))
    assert not high.continue_play


def test_big_round_score_and_lead_bias_toward_stopping() -> None:
    catalog, rs = _load()
    ai = _cards(catalog, 1, 9, 29, 45)
    yaku = score_yaku(ai, rs)
    small = evaluate_continue(yaku, RoundScoreState(3, 0, 0, 20), ai, [], ruleset=rs, catalog=catalog, rng=Fixed(0.99))
    big = evaluate_continue(yaku, RoundScoreState(10, 20, 0, 20), ai, [], ruleset=rs, catalog=catalog, rng=Fixed(0.99))
    assert small.probability is not None and big.probability is not None
    assert big.probability < small.probability
    assert big.probability == 0.05


def test_seeded_rng_reproduces_decisions() -> None:
    catalog, rs = _load()
    ai = _cards(catalog, 9, 33)
    yaku = score_yaku(ai, rs)
    opponent = _cards(catalog, 14, 18, 26)

    def run(seed: int) -> list[bool]:
        rng = random.Random(seed)
        return [
            decide_continue(yaku, RoundScoreState(3, n, 2, 24), ai, opponent, ruleset=rs, catalog=catalog, rng=rng)
            for n in range(20)
        ]

    assert run(7) == run(7)


def test_completion_probability_with_empty_deck() -> None:
    assert remaining_turns(0) == 1
    assert remaining_turns(-3) == 1
    assert remaining_turns(11) == 6
    assert estimate_completion_probability(_threat(1, 1), 0) == pytest.approx(0.33 * 0.8)


def test_completion_probability_shape() -> None:
    p1 = estimate_completion_probability(_threat(1, 5), 20)
    p2 = estimate_completion_probability(_threat(2, 5), 20)
    p3 = estimate_completion_probability(_threat(4, 5), 20)
    assert p1 > p2 > p3 > 0.0

    assert estimate_completion_probability(_threat(1, 5), 4) < p1
    assert estimate_completion_probability(_threat(1, 14), 48) == 0.95
    assert estimate_completion_probability(_threat(2, 2), 20) < p2


def test_unknown_tier_is_rejected() -> None:
    catalog, rs = _load()
    with pytest.raises(InvalidInputError):
        evaluate_continue([], RoundScoreState(1, 0, 0, 10), [], [], ruleset=rs, catalog=catalog, rng=Fixed(0.0), tier="wild")  # type: ignore[arg-type]
