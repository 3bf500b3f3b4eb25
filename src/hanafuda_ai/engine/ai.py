from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..services.telemetry import DecisionEvent, TelemetryService
from .errors import InvalidInputError
from .koikoi import evaluate_continue
from .opportunities import evaluate_opportunities
from .sage import decide_sage_or_shoubu
from .selector import select_capture, select_card
from .serialize import card_to_dict, choice_to_dict, verdict_to_dict
from .threats import analyze_threats
from .types import (
    Card,
    CardCatalog,
    CardChoice,
    Opportunity,
    RoundScoreState,
    RuleSet,
    SageChoice,
    ScoredYaku,
    Threat,
    Tier,
)
from .yaku import score_yaku


@dataclass(frozen=True)
class AISpec:
    """AI tuning parameters.

    tier:
      baseline  = match-count and card-type heuristics, reduced koi-koi ladder
      strategic = threat / opportunity scoring and completion-probability risk model
    ruleset: name of the yaku ruleset loaded from rulesets.json
    """

    tier: Tier = "strategic"
    ruleset: str = "standard"


@dataclass
class HanafudaAI:
    """Computer opponent bound to one catalog and ruleset.

    Holds no game state; every call reads the zones it is given and returns a
    decision for the host to apply. ``rng`` is only drawn from by the
    koi-koi probabilistic zone.
    """

    catalog: CardCatalog
    ruleset: RuleSet
    spec: AISpec = field(default_factory=AISpec)
    rng: random.Random = field(default_factory=random.Random)
    telemetry: TelemetryService | None = None

    def analyze_threats(self, opponent_captured: Sequence[Card], ai_captured: Sequence[Card]) -> list[Threat]:
        return analyze_threats(opponent_captured, ai_captured, ruleset=self.ruleset, catalog=self.catalog)

    def evaluate_opportunities(
        self,
        hand: Sequence[Card],
        captured: Sequence[Card],
        field: Sequence[Card],
        opponent_captured: Sequence[Card],
    ) -> list[Opportunity]:
        return evaluate_opportunities(
            hand, captured, field, opponent_captured, ruleset=self.ruleset, catalog=self.catalog
        )

    def score(self, captured: Sequence[Card]) -> list[ScoredYaku]:
        return score_yaku(captured, self.ruleset)

    def select_card(
        self,
        hand: Sequence[Card],
        captured: Sequence[Card],
        field: Sequence[Card],
        opponent_captured: Sequence[Card],
    ) -> CardChoice:
        choice = select_card(
            hand,
            captured,
            field,
            opponent_captured,
            ruleset=self.ruleset,
            catalog=self.catalog,
            tier=self.spec.tier,
        )
        self._log("CARD_SELECTED", choice_to_dict(choice))
        return choice

    def select_capture(
        self,
        card: Card,
        hand: Sequence[Card],
        captured: Sequence[Card],
        field: Sequence[Card],
        opponent_captured: Sequence[Card],
    ) -> Card | None:
        match = select_capture(
            card,
            hand,
            captured,
            field,
            opponent_captured,
            ruleset=self.ruleset,
            catalog=self.catalog,
            tier=self.spec.tier,
        )
        self._log("CAPTURE_SELECTED", {"card": card_to_dict(card), "match": card_to_dict(match)})
        return match

    def decide_continue(
        self,
        current_yaku: Sequence[ScoredYaku],
        state: RoundScoreState,
        ai_captured: Sequence[Card],
        opponent_captured: Sequence[Card],
    ) -> bool:
        verdict = evaluate_continue(
            current_yaku,
            state,
            ai_captured,
            opponent_captured,
            ruleset=self.ruleset,
            catalog=self.catalog,
            rng=self.rng,
            tier=self.spec.tier,
        )
        self._log("CONTINUE_DECIDED", verdict_to_dict(verdict))
        return verdict.continue_play

    def decide_sage(
        self,
        hand_value_estimate: int,
        own_score: int,
        opponent_scores: Sequence[int],
        round_index: int,
        total_rounds: int,
    ) -> SageChoice:
        choice = decide_sage_or_shoubu(
            hand_value_estimate, own_score, opponent_scores, round_index, total_rounds, tier=self.spec.tier
        )
        self._log("SAGE_DECIDED", {"choice": choice, "hand_value": hand_value_estimate})
        return choice

    def _log(self, event: DecisionEvent, payload: dict[str, object]) -> None:
        if self.telemetry is not None:
            self.telemetry.log(event, {"tier": self.spec.tier, "ruleset": self.ruleset.name, **payload})


def new_ai(
    catalog: CardCatalog,
    rulesets: dict[str, RuleSet],
    spec: AISpec | None = None,
    *,
    seed: int | None = None,
    telemetry: TelemetryService | None = None,
) -> HanafudaAI:
    spec = spec or AISpec()
    if spec.tier not in ("baseline", "strategic"):
        raise InvalidInputError(f"Unknown AI tier: {spec.tier}")
    ruleset = rulesets.get(spec.ruleset)
    if ruleset is None:
        raise InvalidInputError(f"Unknown ruleset: {spec.ruleset}")
    return HanafudaAI(
        catalog=catalog,
        ruleset=ruleset,
        spec=spec,
        rng=random.Random(seed),
        telemetry=telemetry,
    )
