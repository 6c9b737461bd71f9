from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from specrunner.config import substitute_payload
from specrunner.exceptions import UnknownActionError
from specrunner.schema import ActionKind, Step

from .browser_actions import (
    action_goto, action_click, action_click_button, action_click_link,
    action_hover, action_press, action_wait,
)
from .form_actions import (
    action_fill, action_fill_field, action_select, action_check, action_uncheck,
    action_wait_for, action_screenshot,
)
from .assert_actions import (
    action_assert_visible, action_assert_hidden, action_assert_url,
    action_assert_enabled, action_assert_disabled,
)

# -----------------------------------------------------
# action kind -> function
# -----------------------------------------------------
ACTION_REGISTRY = {
    # navigation / pointer / keyboard
    ActionKind.GOTO: action_goto,
    ActionKind.CLICK: action_click,
    ActionKind.CLICK_BUTTON: action_click_button,
    ActionKind.CLICK_LINK: action_click_link,
    ActionKind.HOVER: action_hover,
    ActionKind.PRESS: action_press,
    ActionKind.WAIT: action_wait,

    # forms / page
    ActionKind.FILL: action_fill,
    ActionKind.FILL_FIELD: action_fill_field,
    ActionKind.SELECT: action_select,
    ActionKind.CHECK: action_check,
    ActionKind.UNCHECK: action_uncheck,
    ActionKind.WAIT_FOR: action_wait_for,
    ActionKind.SCREENSHOT: action_screenshot,

    # assertions
    ActionKind.ASSERT_VISIBLE: action_assert_visible,
    ActionKind.ASSERT_HIDDEN: action_assert_hidden,
    ActionKind.ASSERT_URL: action_assert_url,
    ActionKind.ASSERT_ENABLED: action_assert_enabled,
    ActionKind.ASSERT_DISABLED: action_assert_disabled,
}

_missing = set(ActionKind) - set(ACTION_REGISTRY)
if _missing:
    raise ImportError(f"ACTION_REGISTRY has no entry for: {sorted(k.value for k in _missing)}")


@dataclass(frozen=True)
class ActionContext:
    """Per-spec settings every action receives."""
    screenshots_dir: Path
    base_url: Optional[str] = None
    timeout_ms: int = 7000
    variables: Dict[str, Any] = field(default_factory=dict)


def execute_step(page, step: Step, ctx: ActionContext) -> None:
    if step.kind is None:
        raise UnknownActionError(step.action)
    action = ACTION_REGISTRY[step.kind]
    action(
        page,
        value=substitute_payload(step.payload, ctx.variables),
        base_url=ctx.base_url,
        timeout_ms=ctx.timeout_ms,
        screenshots_dir=ctx.screenshots_dir,
    )
