"""Example custom callback: summarize Aj relative to the event plane."""

from __future__ import annotations

import json
import math
from pathlib import Path

from jetbias.io import read_event_table


def process(summary, context):
    """Split accepted dijets into in-plane/out-of-plane and save mean Aj per class."""
    payload = {"n_events": summary.n_events, "n_accepted": summary.n_accepted}
    if summary.sink_open and summary.n_accepted:
        df = read_event_table(context["output_path"]).dropna(subset=["Polar"])
        # Leading-jet angle relative to the event plane, folded into [0, pi/2].
        rel = (df["Jet1_Ang"] - df["Polar"]).abs() % math.pi
        rel = rel.where(rel <= math.pi / 2, math.pi - rel)
        in_plane = df[rel < math.pi / 4]
        out_of_plane = df[rel >= math.pi / 4]
        payload["mean_aj_in_plane"] = None if in_plane.empty else float(in_plane["Aj"].mean())
        payload["mean_aj_out_of_plane"] = None if out_of_plane.empty else float(out_of_plane["Aj"].mean())
    out = Path(context["output_path"]).with_name("event_plane_summary.json")
    out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    print(f"Wrote {out}")
