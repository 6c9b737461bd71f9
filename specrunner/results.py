"""Run results and the cross-spec accumulator."""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from specrunner.schema import SpecStatus


class ScenarioOutcome(BaseModel):
    """Result of one scenario."""

    model_config = ConfigDict(frozen=True)

    name: str
    passed: bool
    error: Optional[str] = None
    screenshot: Optional[str] = None


class SpecResult(BaseModel):
    """Result of one spec file; built once after its scenarios ran."""

    model_config = ConfigDict(frozen=True)

    feature: str
    status: SpecStatus
    passed: int = 0
    failed: int = 0
    scenarios: Tuple[ScenarioOutcome, ...] = ()

    @classmethod
    def from_outcomes(cls, feature: str, status: SpecStatus, outcomes) -> "SpecResult":
        outcomes = tuple(outcomes)
        passed = sum(1 for o in outcomes if o.passed)
        return cls(
            feature=feature,
            status=status,
            passed=passed,
            failed=len(outcomes) - passed,
            scenarios=outcomes,
        )


class Tally(BaseModel):
    model_config = ConfigDict(frozen=True)

    passed: int = 0
    failed: int = 0

    def plus(self, passed: int = 0, failed: int = 0) -> "Tally":
        return Tally(passed=self.passed + passed, failed=self.failed + failed)


class RunSummary(BaseModel):
    """
    Pass/fail counts per status across every spec of one invocation.
    Immutable: add() and add_load_failure() return a new summary.
    """

    model_config = ConfigDict(frozen=True)

    active: Tally = Tally()
    draft: Tally = Tally()
    load_errors: int = 0

    def tally(self, status: SpecStatus) -> Tally:
        return self.active if status == SpecStatus.ACTIVE else self.draft

    def add(self, result: SpecResult) -> "RunSummary":
        key = result.status.value
        updated = self.tally(result.status).plus(result.passed, result.failed)
        return self.model_copy(update={key: updated})

    def add_load_failure(self) -> "RunSummary":
        # the status lives inside the unparsed file, so it cannot gate it
        return self.model_copy(update={
            "draft": self.draft.plus(failed=1),
            "load_errors": self.load_errors + 1,
        })

    @property
    def exit_code(self) -> int:
        if self.active.failed > 0:
            return 1
        # a file that could not be loaded was never checked at all
        if self.load_errors > 0:
            return 1
        # draft failures are expected and do not fail the run
        return 0
