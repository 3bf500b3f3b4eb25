from __future__ import annotations

import pytest

from hanafuda_ai.engine.errors import InvalidInputError
from hanafuda_ai.engine.sage import decide_sage_or_shoubu


@pytest.mark.parametrize(
    "value, own, opponents, expected",
    [
        (20, 300, [150, 100], "stop"),
        (16, 0, [200, 0], "continue"),
        (12, 100, [120, 90], "stop"),
        (5, 100, [100, 100], "cancel"),
        (9, 100, [100, 100], "continue"),
        (12, 0, [40, 20], "stop"),
        (12, 0, [80, 20], "continue"),
    ],
)
def test_baseline_rule_ladder(value: int, own: int, opponents: list[int], expected: str) -> None:
    assert decide_sage_or_shoubu(value, own, opponents, 3, 6) == expected


def test_strategic_secures_a_big_lead_late() -> None:
    assert decide_sage_or_shoubu(5, 300, [100, 150], 10, 12, tier="strategic") == "stop"


def test_strategic_gambles_when_far_behind_with_rounds_left() -> None:
    assert decide_sage_or_shoubu(14, 0, [150, 20], 1, 12, tier="strategic") == "continue"


def test_strategic_expected_value_favours_continuing_early() -> None:
    # 0.6 + 0.05 * 5 = 0.85 success rate: 0.85v > 1.5 * 0.5v
    assert decide_sage_or_shoubu(5, 100, [100, 100], 1, 6, tier="strategic") == "continue"


def test_strategic_falls_back_to_thresholds_when_inconclusive() -> None:
    # one round left: 0.65v does not beat 0.75v, so the baseline ladder decides
    assert decide_sage_or_shoubu(5, 100, [100, 100], 5, 6, tier="strategic") == "cancel"
    assert decide_sage_or_shoubu(12, 100, [90], 5, 6, tier="strategic") == "stop"


def test_invalid_arguments() -> None:
    with pytest.raises(InvalidInputError):
        decide_sage_or_shoubu(5, 0, [], 1, 6)
    with pytest.raises(InvalidInputError):
        decide_sage_or_shoubu(5, 0, [1], 1, 6, tier="expert")  # type: ignore[arg-type]
