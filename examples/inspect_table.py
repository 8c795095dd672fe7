"""Utility script to inspect/plot event tables produced by the dijet analysis."""

from __future__ import annotations

import argparse
from pathlib import Path

from jetbias.io import read_event_table


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for interactive inspection and optional quick plotting."""
    parser = argparse.ArgumentParser(description="Inspect a dijet event table.")
    parser.add_argument("--input", default="eventdata.dat", help="Path to the tab-separated table.")
    parser.add_argument("--head", type=int, default=10, help="Rows to print.")
    parser.add_argument(
        "--plot",
        action="store_true",
        help="Create a weighted Aj histogram (png).",
    )
    args = parser.parse_args(argv)

    df = read_event_table(args.input)
    print(df.head(args.head).to_string(index=False))
    print(f"\nRows={len(df)}  Columns={len(df.columns)}")
    if len(df):
        mean_aj = (df["Aj"] * df["Weight"]).sum() / df["Weight"].sum()
        print(f"Weighted <Aj> = {mean_aj:.4f}")

    if args.plot:
        try:
            import matplotlib.pyplot as plt  # type: ignore
        except ModuleNotFoundError:
            print("matplotlib not installed; skipping plot.")
            return 0
        out = Path(args.input).with_suffix(".png")
        ax = df["Aj"].plot.hist(bins=20, range=(0.0, 1.0), weights=df["Weight"], alpha=0.7)
        ax.set_xlabel("Aj")
        ax.set_title("Dijet momentum asymmetry")
        plt.tight_layout()
        plt.savefig(out, dpi=120)
        print(f"Saved plot: {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
