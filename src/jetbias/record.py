"""Per-event record schema for the output table.

The column order is fixed here rather than derived from whichever fields an
event happens to populate, so every row lines up with the header.
"""

from __future__ import annotations

import math
from typing import Mapping

RECORD_FIELDS: tuple[str, ...] = (
    "Polar",
    "JProdR",
    "Jet1_pT",
    "Jet2_pT",
    "JetAngle",
    "Jet1_Ang",
    "Aj",
    "Weight",
)

UNSET = math.nan


def new_record() -> dict[str, float]:
    """Return a fresh record with every field set to the NaN sentinel."""
    return dict.fromkeys(RECORD_FIELDS, UNSET)


def record_values(
    record: Mapping[str, float], fields: tuple[str, ...] = RECORD_FIELDS
) -> list[float]:
    """Return record values in schema order.

    Raises `KeyError` for a missing field and `ValueError` for fields outside
    the schema.
    """
    extra = [name for name in record if name not in fields]
    if extra:
        raise ValueError(f"Record has fields outside the table schema: {', '.join(extra)}")
    values: list[float] = []
    for name in fields:
        if name not in record:
            raise KeyError(f"Record is missing field '{name}'.")
        values.append(float(record[name]))
    return values
