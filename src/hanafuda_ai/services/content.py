from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from hanafuda_ai.engine.types import Card, CardCatalog, RuleSet, YakuDefinition


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def _load_schema(path: Path) -> object:
    return _load_json(path)


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: e.path)
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


def _optional_str(obj: Mapping[str, object], key: str) -> str | None:
    v = obj.get(key)
    if v is None:
        return None
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _str_set(obj: Mapping[str, object], key: str) -> frozenset[str]:
    raw = obj.get(key, [])
    if not isinstance(raw, list):
        raise ContentError(f"{key} must be a list")
    # trust schema for allowed values
    return frozenset(item for item in raw if isinstance(item, str))


def _parse_card(raw: Mapping[str, object]) -> Card:
    return Card(
        id=_require_int(raw, "id"),
        month=_require_int(raw, "month"),
        type=_require_str(raw, "type"),  # type: ignore[arg-type]
        name=_require_str(raw, "name"),
        points=_require_int(raw, "points"),
        ribbon_color=_optional_str(raw, "ribbon_color"),  # type: ignore[arg-type]
        special=_optional_str(raw, "special"),  # type: ignore[arg-type]
    )


def _parse_yaku(raw: Mapping[str, object]) -> YakuDefinition:
    track_from = raw.get("track_from", 1)
    extra = raw.get("extra_per_card", 0)
    if not isinstance(track_from, int) or not isinstance(extra, int):
        raise ContentError("track_from and extra_per_card must be ints")
    return YakuDefinition(
        name=_require_str(raw, "name"),
        family=_require_str(raw, "family"),  # type: ignore[arg-type]
        minimum=_require_int(raw, "minimum"),
        points=_require_int(raw, "points"),
        group=_optional_str(raw, "group"),
        types=_str_set(raw, "types"),
        tags=_str_set(raw, "tags"),
        ribbon_colors=_str_set(raw, "ribbon_colors"),
        exclude_tags=_str_set(raw, "exclude_tags"),
        require_tags=_str_set(raw, "require_tags"),
        extra_per_card=extra,
        track_from=track_from,
    )


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_catalog(self) -> CardCatalog:
        path = self._data_dir / "cards.json"
        schema = _load_schema(self._schema_dir / "cards.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))

        if not isinstance(raw, dict):
            raise ContentError("cards.json must be an object")
        raw_cards = raw.get("cards")
        if not isinstance(raw_cards, list):
            raise ContentError("cards.json.cards must be a list")

        cards: dict[int, Card] = {}
        for item in raw_cards:
            if not isinstance(item, dict):
                continue
            card = _parse_card(item)
            if card.id in cards:
                raise ContentError(f"Duplicate card id: {card.id}")
            cards[card.id] = card

        per_month = Counter(c.month for c in cards.values())
        bad = sorted(m for m in range(1, 13) if per_month.get(m) != 4)
        if bad:
            raise ContentError(f"Every month needs exactly 4 cards; check months {bad}")
        return CardCatalog(cards=cards)

    def load_rulesets(self) -> dict[str, RuleSet]:
        path = self._data_dir / "rulesets.json"
        schema = _load_schema(self._schema_dir / "rulesets.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))

        if not isinstance(raw, dict):
            raise ContentError("rulesets.json must be an object")
        raw_sets = raw.get("rulesets")
        if not isinstance(raw_sets, list):
            raise ContentError("rulesets.json.rulesets must be a list")

        out: dict[str, RuleSet] = {}
        for item in raw_sets:
            if not isinstance(item, dict):
                continue
            name = _require_str(item, "name")
            if name in out:
                raise ContentError(f"Duplicate ruleset: {name}")
            own = [_parse_yaku(y) for y in item.get("yaku", []) if isinstance(y, dict)]

            base_name = _optional_str(item, "extends")
            if base_name is None:
                yaku = own
                viewing = item.get("viewing_sake", "always")
            else:
                base = out.get(base_name)
                if base is None:
                    raise ContentError(f"Ruleset {name} extends unknown ruleset {base_name}")
                # Same-name entries replace the base's; new names are appended.
                overrides = {y.name: y for y in own}
                yaku = [overrides.pop(y.name, y) for y in base.yaku]
                yaku.extend(overrides.values())
                viewing = item.get("viewing_sake", base.viewing_sake)

            out[name] = RuleSet(name=name, viewing_sake=viewing, yaku=tuple(yaku))  # type: ignore[arg-type]
        return out

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_catalog()
        _ = self.load_rulesets()
