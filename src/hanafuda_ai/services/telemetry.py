from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Mapping

DecisionEvent = Literal["CARD_SELECTED", "CAPTURE_SELECTED", "CONTINUE_DECIDED", "SAGE_DECIDED"]


@dataclass
class TelemetryService:
    """Append-only JSONL log of AI decisions, one record per decision."""

    path: Path

    def log(self, event: DecisionEvent, payload: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "event": event,
            "decision": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")
