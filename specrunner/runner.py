# specrunner/runner.py
from __future__ import annotations
import re
from pathlib import Path
from typing import Callable, ContextManager, Iterable, List, Optional, Set

from specrunner import reporting
from specrunner.actions import ActionContext, execute_step
from specrunner.browser import browser_session
from specrunner.config import RunOptions, load_options, rand_token, substitute_vars
from specrunner.exceptions import EngineError, SpecLoadError
from specrunner.results import RunSummary, ScenarioOutcome, SpecResult
from specrunner.schema import Scenario, Spec, load_spec

SessionFactory = Callable[[RunOptions], ContextManager]

def failure_screenshot_path(spec_path: Path, scenario_name: str, dirname: str = "screenshots") -> Path:
    """<spec dir>/<dirname>/<spec stem>-<scenario name, lower-cased, whitespace as '-'>.png"""
    slug = re.sub(r"\s+", "-", scenario_name.strip()).lower()
    slug = re.sub(r"[^\w.-]+", "_", slug)
    return spec_path.parent / dirname / f"{spec_path.stem}-{slug}.png"

def _unique_path(path: Path, taken: Set[Path]) -> Path:
    # same-named scenarios (case-insensitively) get -2, -3, ... in scenario order
    candidate, n = path, 2
    while candidate in taken:
        candidate = path.with_name(f"{path.stem}-{n}{path.suffix}")
        n += 1
    taken.add(candidate)
    return candidate

def _capture_failure(page, shot: Path) -> Optional[str]:
    try:
        shot.parent.mkdir(parents=True, exist_ok=True)
        page.screenshot(path=str(shot), full_page=True)
    except Exception as e:
        # the scenario already failed; a missing screenshot must not mask that
        reporting.warn(f"could not capture failure screenshot {shot}: {e}")
        return None
    return str(shot)

def run_scenario(page, scenario: Scenario, *, ctx: ActionContext, failure_shot: Path) -> ScenarioOutcome:
    reporting.scenario_started(scenario.name)
    try:
        for step in scenario.steps:
            reporting.step_started(step)
            execute_step(page, step, ctx)
    except Exception as e:
        shot = _capture_failure(page, failure_shot)
        error = str(e) or type(e).__name__
        reporting.scenario_failed(error, shot)
        return ScenarioOutcome(name=scenario.name, passed=False, error=error, screenshot=shot)
    reporting.scenario_passed()
    return ScenarioOutcome(name=scenario.name, passed=True)

def run_spec(
    spec: Spec,
    spec_path: Path,
    options: RunOptions,
    *,
    session_factory: Optional[SessionFactory] = None,
) -> SpecResult:
    session_factory = session_factory or browser_session
    spec_path = Path(spec_path)
    reporting.spec_started(spec, spec_path)

    screenshots_dir = spec_path.parent / options.screenshots_dirname
    variables = {"RAND": rand_token()}
    for name, value in spec.variables.items():
        variables[name] = substitute_vars(value, variables)
    ctx = ActionContext(
        screenshots_dir=screenshots_dir,
        base_url=spec.base_url or options.base_url,
        timeout_ms=options.timeout_ms,
        variables=variables,
    )

    outcomes: List[ScenarioOutcome] = []
    taken: Set[Path] = set()
    try:
        with session_factory(options) as page:
            for scenario in spec.scenarios:
                shot = _unique_path(failure_screenshot_path(spec_path, scenario.name, options.screenshots_dirname), taken)
                outcomes.append(run_scenario(page, scenario, ctx=ctx, failure_shot=shot))
    except EngineError as e:
        # browser never came up (or died on close): every scenario not yet run counts as failed
        reporting.warn(str(e))
        for scenario in spec.scenarios[len(outcomes):]:
            outcomes.append(ScenarioOutcome(name=scenario.name, passed=False, error=str(e)))

    result = SpecResult.from_outcomes(spec.feature, spec.status, outcomes)
    reporting.spec_finished(result)
    return result

def run_spec_file(
    path: Path,
    options: RunOptions,
    *,
    session_factory: Optional[SessionFactory] = None,
) -> SpecResult:
    """Loads and runs one spec; SpecLoadError propagates to the caller."""
    spec = load_spec(Path(path))
    return run_spec(spec, Path(path), options, session_factory=session_factory)

def run_specs(
    paths: Iterable[Path],
    options: Optional[RunOptions] = None,
    *,
    session_factory: Optional[SessionFactory] = None,
) -> RunSummary:
    options = options or load_options()
    summary = RunSummary()
    for path in paths:
        try:
            result = run_spec_file(Path(path), options, session_factory=session_factory)
        except SpecLoadError as e:
            reporting.load_failed(Path(path), e)
            summary = summary.add_load_failure()
            continue
        summary = summary.add(result)
    return summary
