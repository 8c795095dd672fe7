"""Multi-event API example running the dijet analysis with custom cuts.

Run from repository root without installation:
    PYTHONPATH=src python examples/run_analysis.py
"""

from __future__ import annotations

import logging

from jetbias import AnalysisConfig, DijetAnalysis, DijetCuts, JetCuts
from jetbias.io import load_events_json


def main() -> int:
    """Load events, select back-to-back dijets, and write the event table."""
    logging.basicConfig(level=logging.INFO)
    events = load_events_json("examples/events.json")
    config = AnalysisConfig(
        output_path="examples/eventdata.dat",
        jet_cuts=JetCuts(max_abs_eta=2.0, min_pt=20.0),
        dijet_cuts=DijetCuts(min_leading_pt=80.0),
    )
    summary = DijetAnalysis(config).run(events)
    print(f"Accepted {summary.n_accepted}/{summary.n_events} events into {summary.output_path}")
    for reason, count in summary.cutflow.items():
        print(f"  {reason}: {count}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
