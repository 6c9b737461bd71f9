# specrunner/schema.py
from __future__ import annotations
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from specrunner.exceptions import SpecFileError, SpecParseError, StepValidationError


class SpecStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"


class ActionKind(str, Enum):
    GOTO = "goto"
    CLICK = "click"
    CLICK_BUTTON = "click_button"
    CLICK_LINK = "click_link"
    FILL = "fill"
    FILL_FIELD = "fill_field"
    SELECT = "select"
    CHECK = "check"
    UNCHECK = "uncheck"
    HOVER = "hover"
    PRESS = "press"
    WAIT = "wait"
    WAIT_FOR = "wait_for"
    ASSERT_VISIBLE = "assert_visible"
    ASSERT_HIDDEN = "assert_hidden"
    ASSERT_URL = "assert_url"
    ASSERT_ENABLED = "assert_enabled"
    ASSERT_DISABLED = "assert_disabled"
    SCREENSHOT = "screenshot"


# ---------- payload records ----------

class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", coerce_numbers_to_str=True)


class SelectorTarget(_Payload):
    selector: str = Field(min_length=1)


class SelectorFill(_Payload):
    selector: str = Field(min_length=1)
    value: str


class LabelFill(_Payload):
    label: str = Field(min_length=1)
    value: str


class LabelSelect(_Payload):
    label: str = Field(min_length=1)
    option: str


class TextWait(_Payload):
    """Text to wait on; timeout in milliseconds overrides the action default."""
    text: str = Field(min_length=1)
    timeout: Optional[int] = Field(default=None, gt=0)


class Step(BaseModel):
    """
    One parsed step. `kind` is None when `action` is not a known action;
    executing such a step raises UnknownActionError.
    """
    model_config = ConfigDict(frozen=True)

    action: str
    kind: Optional[ActionKind]
    payload: Any = None


class Scenario(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    steps: Tuple[Step, ...] = ()


class Spec(BaseModel):
    model_config = ConfigDict(frozen=True)

    feature: str
    description: Optional[str] = None
    status: SpecStatus = SpecStatus.DRAFT
    base_url: Optional[str] = None
    variables: Dict[str, str] = Field(default_factory=dict)
    scenarios: Tuple[Scenario, ...] = ()


# ---------- payload parsing ----------

def _as_text(v: Any) -> str:
    if isinstance(v, bool) or v is None:
        raise ValueError(f"expected text, got {v!r}")
    if isinstance(v, (int, float)):
        return str(v)
    if not isinstance(v, str) or not v.strip():
        raise ValueError(f"expected non-empty text, got {v!r}")
    return v

def _as_wait_ms(v: Any) -> float:
    # accepts 500 and "500ms"
    if isinstance(v, str) and v.strip().lower().endswith("ms"):
        v = v.strip()[:-2].strip()
        v = float(v) if v.replace(".", "", 1).isdigit() else None
    if isinstance(v, bool) or not isinstance(v, (int, float)) or v < 0:
        raise ValueError(f"expected a non-negative number of milliseconds, got {v!r}")
    return float(v)

def _click_target(v: Any):
    if isinstance(v, dict):
        return SelectorTarget.model_validate(v)
    return _as_text(v)

def _text_wait(v: Any) -> TextWait:
    if isinstance(v, dict):
        return TextWait.model_validate(v)
    return TextWait(text=_as_text(v))

def _record(model):
    def parse(v: Any):
        if not isinstance(v, dict):
            raise ValueError(f"expected a mapping with keys {sorted(model.model_fields)}, got {v!r}")
        return model.model_validate(v)
    return parse


PAYLOAD_PARSERS: Dict[ActionKind, Callable[[Any], Any]] = {
    ActionKind.GOTO: _as_text,
    ActionKind.CLICK: _click_target,
    ActionKind.CLICK_BUTTON: _as_text,
    ActionKind.CLICK_LINK: _as_text,
    ActionKind.FILL: _record(SelectorFill),
    ActionKind.FILL_FIELD: _record(LabelFill),
    ActionKind.SELECT: _record(LabelSelect),
    ActionKind.CHECK: _as_text,
    ActionKind.UNCHECK: _as_text,
    ActionKind.HOVER: _as_text,
    ActionKind.PRESS: _as_text,
    ActionKind.WAIT: _as_wait_ms,
    ActionKind.WAIT_FOR: _text_wait,
    ActionKind.ASSERT_VISIBLE: _text_wait,
    ActionKind.ASSERT_HIDDEN: _text_wait,
    ActionKind.ASSERT_URL: _as_text,
    ActionKind.ASSERT_ENABLED: _as_text,
    ActionKind.ASSERT_DISABLED: _as_text,
    ActionKind.SCREENSHOT: _as_text,
}


def parse_step(raw: Any, where: str = "step") -> Step:
    if not isinstance(raw, dict):
        raise StepValidationError(f"{where} must be a mapping like {{click: Sign In}}, got {raw!r}")
    if len(raw) != 1:
        keys = ", ".join(str(k) for k in raw) or "none"
        raise StepValidationError(f"{where} must have exactly one action key (found: {keys})")

    (action, value), = raw.items()
    action = str(action).strip()
    try:
        kind = ActionKind(action)
    except ValueError:
        return Step(action=action, kind=None, payload=value)

    try:
        payload = PAYLOAD_PARSERS[kind](value)
    except (ValidationError, ValueError, TypeError) as e:
        raise StepValidationError(f"{where} '{action}': {e}") from e
    return Step(action=action, kind=kind, payload=payload)


# ---------- spec parsing ----------

def _require(d: Dict[str, Any], key: str, msg: str):
    if key not in d or d[key] in (None, ""):
        raise SpecParseError(msg)

def _parse_status(v: Any) -> SpecStatus:
    if v is None:
        return SpecStatus.DRAFT
    try:
        return SpecStatus(str(v).strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in SpecStatus)
        raise SpecParseError(f"Unknown status {v!r} (expected one of: {allowed})") from None

def _parse_scenario(raw: Any, idx: int) -> Scenario:
    if not isinstance(raw, dict):
        raise SpecParseError(f"Scenario {idx} must be a mapping")
    _require(raw, "name", f"Scenario {idx} missing 'name'")
    steps = raw.get("steps")
    if not isinstance(steps, list):
        raise SpecParseError(f"Scenario {idx} ({raw['name']}) must have a 'steps' list")
    name = str(raw["name"])
    return Scenario(
        name=name,
        steps=tuple(parse_step(st, where=f"Scenario '{name}' step {i}") for i, st in enumerate(steps, start=1)),
    )

def build_spec(raw: Any) -> Spec:
    """Validates a decoded YAML document and turns it into a Spec."""
    if not isinstance(raw, dict):
        raise SpecParseError("Spec must be a mapping with 'feature' and 'scenarios'")
    _require(raw, "feature", "Spec missing 'feature'")
    if "scenarios" not in raw:
        raise SpecParseError("Spec missing 'scenarios'")

    scenarios = raw["scenarios"]
    if scenarios is None:
        scenarios = []
    if not isinstance(scenarios, list):
        raise SpecParseError("'scenarios' must be a list")

    variables = raw.get("variables") or {}
    if not isinstance(variables, dict):
        raise SpecParseError("'variables' must be a mapping")

    description = raw.get("description")
    base_url = raw.get("base_url")
    return Spec(
        feature=str(raw["feature"]),
        description=str(description) if description is not None else None,
        status=_parse_status(raw.get("status")),
        base_url=str(base_url) if base_url else None,
        variables={str(k): str(v) for k, v in variables.items()},
        scenarios=tuple(_parse_scenario(sc, i) for i, sc in enumerate(scenarios, start=1)),
    )


def read_yaml(path: Path) -> Any:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise SpecFileError(f"Spec file not found: {p}") from e
    except UnicodeDecodeError as e:
        raise SpecParseError(f"Spec file {p} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise SpecFileError(f"Cannot read spec file {p}: {e}") from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SpecParseError(f"Invalid YAML in {p}: {e}") from e

def load_spec(path: Path) -> Spec:
    return build_spec(read_yaml(path))
