from __future__ import annotations
import os, random, string
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

from pydantic import BaseModel

TRUTHY = ("1", "true", "yes", "y", "on")

def _env_true(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUTHY

def _parse_viewport(v) -> Optional[Sequence[int]]:
    if not v: return None
    if isinstance(v, (list, tuple)) and len(v) == 2: return [int(v[0]), int(v[1])]
    if isinstance(v, str):
        parts = [p.strip() for p in v.lower().replace("×", "x").split("x")]
        if len(parts) == 2 and parts[0].isdigit() and parts[1].isdigit():
            return [int(parts[0]), int(parts[1])]
    return None

def rand_token(n: int = 6) -> str:
    return "".join(random.choice(string.ascii_lowercase + string.digits) for _ in range(n))


@dataclass(frozen=True)
class RunOptions:
    headless: bool = False
    browser: str = "chromium"
    timeout_ms: int = 7000
    slow_mo: int = 0
    viewport: Optional[Sequence[int]] = None
    base_url: Optional[str] = None
    screenshots_dirname: str = "screenshots"


def load_options(env: Mapping[str, str] = os.environ) -> RunOptions:
    """
    Reads run options from the environment.
    HEADLESS wins when set; otherwise a truthy CI implies headless.
    """
    if env.get("HEADLESS") is not None:
        headless = _env_true(env.get("HEADLESS"))
    else:
        headless = _env_true(env.get("CI"))

    return RunOptions(
        headless=headless,
        browser=str(env.get("BROWSER") or "chromium").strip().lower(),
        timeout_ms=int(env.get("SPEC_TIMEOUT_MS") or 7000),
        slow_mo=int(env.get("SLOW_MO") or 0),
        viewport=_parse_viewport(env.get("VIEWPORT")),
        base_url=env.get("SPEC_BASE_URL") or None,
        screenshots_dirname=env.get("SPEC_SCREENSHOTS_DIR") or "screenshots",
    )

def resolve_url(base_url: Optional[str], target: str) -> str:
    if not target: return ""
    if target.startswith("http://") or target.startswith("https://"):
        return target
    if base_url:
        if target.startswith("/"): return base_url.rstrip("/") + target
        return base_url.rstrip("/") + "/" + target.lstrip("/")
    return target

def substitute_vars(value: Any, variables: Dict[str, Any]):
    if not isinstance(value, str): return value
    out = value
    for k, v in (variables or {}).items():
        out = out.replace(f"${{{k}}}", str(v))
    return out

def substitute_payload(payload: Any, variables: Dict[str, Any]):
    """Applies ${NAME} substitution to a step payload (plain string or record)."""
    if isinstance(payload, BaseModel):
        update = {
            name: substitute_vars(getattr(payload, name), variables)
            for name in type(payload).model_fields
            if isinstance(getattr(payload, name), str)
        }
        return payload.model_copy(update=update)
    return substitute_vars(payload, variables)
