"""Command-line interface for running the dijet analysis on event inputs."""

from __future__ import annotations

import argparse
import importlib.util
import logging
import math
from pathlib import Path
from typing import Any

from .analysis import AnalysisSummary, DijetAnalysis
from .io import export_event_table, load_events_json
from .models import DEFAULT_OUTPUT_PATH, AnalysisConfig, DijetCuts, JetCuts


def build_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="jetbias",
        description="Select back-to-back dijets and write per-event observables to a TSV table.",
    )
    parser.add_argument("--events", required=True, help="Input JSON with key 'events'.")
    parser.add_argument(
        "--out",
        default=DEFAULT_OUTPUT_PATH,
        help=f"Output tab-separated table (default: {DEFAULT_OUTPUT_PATH}).",
    )
    parser.add_argument("--min-jet-pt", type=float, default=20.0, help="Jet acceptance: pT > value (GeV).")
    parser.add_argument("--max-jet-abs-eta", type=float, default=2.0, help="Jet acceptance: |eta| < value.")
    parser.add_argument("--min-leading-pt", type=float, default=80.0, help="Leading-jet minimum pT (GeV).")
    parser.add_argument(
        "--back-to-back-window",
        type=float,
        default=math.pi / 8.0,
        help="Allowed distance of the dijet azimuthal difference from pi (radians).",
    )
    parser.add_argument(
        "--include-leading",
        action="store_true",
        help="Also scan the leading jet itself when searching for the recoil partner.",
    )
    parser.add_argument(
        "--export",
        default=None,
        help="Optional copy of the table as .parquet, .csv, or .pkl.",
    )
    parser.add_argument(
        "--custom-script",
        default=None,
        help="Path to Python file with process(summary, context) function.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint: load events, run the analysis, optional export and custom hook."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    events = load_events_json(args.events)
    config = AnalysisConfig(
        output_path=args.out,
        jet_cuts=JetCuts(max_abs_eta=args.max_jet_abs_eta, min_pt=args.min_jet_pt),
        dijet_cuts=DijetCuts(
            min_leading_pt=args.min_leading_pt,
            back_to_back_window=args.back_to_back_window,
            exclude_leading=not args.include_leading,
        ),
    )
    summary = DijetAnalysis(config).run(events)
    print(_format_summary(summary))

    if args.export:
        if summary.sink_open and summary.sink_error is None and summary.n_accepted:
            n_rows = export_event_table(args.out, args.export)
            print(f"Exported {n_rows} rows to {args.export}")
        else:
            print(f"Nothing to export to {args.export}")

    if args.custom_script:
        run_custom_script(
            script_path=args.custom_script,
            summary=summary,
            context={
                "events_path": args.events,
                "config": config,
                "output_path": args.out,
                "export_path": args.export,
            },
        )
    return 0


def run_custom_script(script_path: str, summary: AnalysisSummary, context: dict[str, Any]) -> None:
    """Execute user-supplied post-processing callback `process(summary, context)`."""
    module = _load_module(script_path)
    process = getattr(module, "process", None)
    if process is None or not callable(process):
        raise ValueError(
            f"Custom script {script_path} must define callable process(summary, context)."
        )
    process(summary, context)


def _format_summary(summary: AnalysisSummary) -> str:
    lines = [f"Events processed: {summary.n_events}", f"Events accepted:  {summary.n_accepted}"]
    for reason, count in summary.cutflow.items():
        lines.append(f"  rejected ({reason}): {count}")
    if summary.sink_error is not None:
        lines.append(f"Table {summary.output_path} is incomplete: {summary.sink_error}")
    elif summary.sink_open:
        lines.append(f"Table written to {summary.output_path}")
    else:
        lines.append(f"Output suppressed: could not open {summary.output_path}")
    return "\n".join(lines)


def _load_module(script_path: str):
    """Import a Python module from an arbitrary file path."""
    path = Path(script_path)
    spec = importlib.util.spec_from_file_location(path.stem, path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Cannot import custom script: {script_path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


if __name__ == "__main__":
    raise SystemExit(main())
