# specrunner/reporting.py
from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel
from rich.console import Console
from rich.table import Table
from rich.text import Text

from specrunner.results import RunSummary, SpecResult
from specrunner.schema import Spec, Step

def _payload_repr(payload: Any) -> str:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_none=True)
    if isinstance(payload, float) and payload.is_integer():
        payload = int(payload)
    return json.dumps(payload, ensure_ascii=False, default=str)

def spec_started(spec: Spec, path: Path) -> None:
    print(f"\n🧪 Running: {spec.feature}  [{spec.status.value}]  ({path})\n")

def scenario_started(name: str) -> None:
    print(f"  📋 Scenario: {name}")

def step_started(step: Step) -> None:
    print(f"     → {step.action}: {_payload_repr(step.payload)}")

def scenario_passed() -> None:
    print("     ✅ PASSED\n")

def scenario_failed(error: str, screenshot: Optional[str]) -> None:
    print(f"     ❌ FAILED: {error}")
    if screenshot:
        print(f"     📸 Screenshot: {screenshot}")
    print()

def warn(message: str) -> None:
    print(f"[WARN] {message}")

def spec_finished(result: SpecResult) -> None:
    print(f"📊 Results: {result.passed} passed, {result.failed} failed\n")

def load_failed(path: Path, error: Exception) -> None:
    print(f"\n❌ Could not load {path}: {error}")
    print("   (counted as a draft failure)\n")

def print_summary(summary: RunSummary, console: Optional[Console] = None) -> None:
    console = console or Console()
    table = Table(title="Spec run summary", show_header=True, header_style="bold cyan")
    table.add_column("Status")
    table.add_column("Passed", justify="right")
    table.add_column("Failed", justify="right")
    for label, tally in (("active", summary.active), ("draft", summary.draft)):
        failed_style = "bold red" if tally.failed and label == "active" else ("yellow" if tally.failed else "green")
        table.add_row(label, Text(str(tally.passed), style="green"), Text(str(tally.failed), style=failed_style))
    console.print()
    console.print(table)
    if summary.load_errors:
        console.print(f"[yellow]{summary.load_errors} spec file(s) could not be loaded[/]")
    code = summary.exit_code
    style = "bold green" if code == 0 else "bold red"
    console.print(Text(f"Exit code: {code}", style=style))
