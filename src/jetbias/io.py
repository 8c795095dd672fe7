"""Input/output helpers for JSON event inputs and tabular result export."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .models import EventInput, HeavyIonInfo, Jet
from .writer import DELIMITER


def load_events_json(path: str | Path) -> list[EventInput]:
    """Load multi-event input JSON into `EventInput` objects.

    Expected shape:
    {
      "events": [
        {"event_id": "...", "weights": [...], "heavy_ion": {...}, "jets": [...]},
        ...
      ]
    }
    """
    data = _load_json(path)
    events_data = data.get("events")
    if not isinstance(events_data, list):
        raise ValueError("Events JSON must contain a list under key 'events'.")
    out: list[EventInput] = []
    for idx, event in enumerate(events_data):
        if not isinstance(event, dict):
            raise ValueError(f"Event entry at index {idx} must be an object.")
        event_id = str(event.get("event_id", f"evt{idx}"))
        jets_data = event.get("jets")
        if not isinstance(jets_data, list):
            raise ValueError(f"Event '{event_id}' must contain a list under key 'jets'.")
        jets = tuple(
            _parse_jet_item(item=jet_item, idx=jidx, context=f"event '{event_id}'")
            for jidx, jet_item in enumerate(jets_data)
        )
        out.append(
            EventInput(
                event_id=event_id,
                jets=jets,
                heavy_ion=_parse_heavy_ion(event.get("heavy_ion"), event_id),
                weights=_parse_weights(event, event_id),
            )
        )
    return out


def read_event_table(path: str | Path):
    """Read a tab-separated event table into a pandas DataFrame."""
    pd = _require_pandas()
    return pd.read_csv(Path(path), sep=DELIMITER)


def export_event_table(src: str | Path, dst: str | Path) -> int:
    """Convert an event table into Parquet/CSV/Pickle; return the row count."""
    df = read_event_table(src)
    out = Path(dst)
    suffix = out.suffix.lower()
    if suffix == ".parquet":
        df.to_parquet(out, index=False)
    elif suffix in (".pkl", ".pickle"):
        df.to_pickle(out)
    elif suffix == ".csv":
        df.to_csv(out, index=False)
    else:
        raise ValueError(
            f"Unsupported output format '{suffix}'. Use .parquet, .csv, or .pkl"
        )
    return len(df)


def _require_pandas():
    """Import pandas lazily and provide a clear installation hint on failure."""
    try:
        import pandas as pd  # type: ignore
    except ModuleNotFoundError as exc:
        raise ModuleNotFoundError(
            "pandas is required to read or export event tables. Install pandas and pyarrow."
        ) from exc
    return pd


def _parse_jet_item(item: Any, idx: int, context: str) -> Jet:
    """Parse one jet dictionary into a `Jet`."""
    if not isinstance(item, dict):
        raise ValueError(f"Jet entry at index {idx} in {context} must be an object.")
    missing = [key for key in ("pt", "eta", "phi") if key not in item]
    if missing:
        raise ValueError(
            f"Jet at index {idx} in {context} is missing field(s): {', '.join(missing)}."
        )
    jet_id = item.get("jet_id")
    return Jet(
        pt=_to_float(item["pt"], "pt", f"jet {idx} in {context}"),
        eta=_to_float(item["eta"], "eta", f"jet {idx} in {context}"),
        phi=_to_float(item["phi"], "phi", f"jet {idx} in {context}"),
        jet_id=None if jet_id is None else str(jet_id),
    )


def _parse_heavy_ion(value: Any, event_id: str) -> HeavyIonInfo | None:
    """Parse optional heavy-ion metadata."""
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValueError(f"Field 'heavy_ion' of event '{event_id}' must be an object.")
    context = f"heavy-ion block of event '{event_id}'"
    try:
        return HeavyIonInfo(
            event_plane_angle=_to_float(value["event_plane_angle"], "event_plane_angle", context),
            eccentricity=_to_float(value["eccentricity"], "eccentricity", context),
        )
    except KeyError as exc:
        raise ValueError(
            f"Heavy-ion block of event '{event_id}' is missing field {exc.args[0]!r}."
        ) from exc


def _parse_weights(event: dict[str, Any], event_id: str) -> tuple[float, ...]:
    """Extract the weight vector; a scalar `weight` is accepted as shorthand."""
    if "weights" in event:
        weights = event["weights"]
        if not isinstance(weights, list):
            raise ValueError(f"Field 'weights' of event '{event_id}' must be a list.")
        return tuple(_to_float(w, "weights", f"event '{event_id}'") for w in weights)
    if "weight" in event:
        return (_to_float(event["weight"], "weight", f"event '{event_id}'"),)
    return (1.0,)


def _load_json(path: str | Path) -> dict[str, Any]:
    """Read and validate a JSON object document from disk."""
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"JSON document at {path} must be an object.")
    return data


def _to_float(value: Any, field: str, context: str) -> float:
    """Convert a JSON scalar to float, reporting bad values as `ValueError`."""
    if isinstance(value, bool):
        raise ValueError(f"Field '{field}' of {context} must be a number, got {value!r}.")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Field '{field}' of {context} must be a number, got {value!r}.") from exc
