from __future__ import annotations
import argparse
from pathlib import Path
from typing import Optional, Sequence

from specrunner.config import load_options
from specrunner.reporting import print_summary
from specrunner.runner import run_specs

def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="run-spec",
        description="Run YAML feature specs in a real browser (Playwright).",
        epilog="Set HEADLESS=1 for CI; BROWSER, SPEC_BASE_URL and SPEC_TIMEOUT_MS tune the run.",
    )
    ap.add_argument("specs", nargs="+", type=Path, help="Path(s) to YAML spec files")
    return ap

def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_argparser().parse_args(argv)
    summary = run_specs(args.specs, load_options())
    print_summary(summary)
    return summary.exit_code

if __name__ == "__main__":
    raise SystemExit(main())
