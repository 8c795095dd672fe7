"""Core data models used by the dijet geometrical-bias analysis.

This module defines:
- immutable physics objects (`Jet`, `HeavyIonInfo`)
- event containers (`EventInput`) with the pT-ordered jet retrieval used by the selector
- configurable selection controls (`JetCuts`, `DijetCuts`)
- the run configuration (`AnalysisConfig`).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

DEFAULT_OUTPUT_PATH = "eventdata.dat"


@dataclass(frozen=True)
class Jet:
    """Single reconstructed jet as delivered by the jet-clustering step.

    `phi` is kept exactly as supplied (radians); no wrapping is applied.
    """

    pt: float
    eta: float
    phi: float
    jet_id: str | None = None

    @property
    def abs_eta(self) -> float:
        """Absolute pseudorapidity."""
        return abs(self.eta)


@dataclass(frozen=True)
class HeavyIonInfo:
    """Collision-geometry metadata attached to heavy-ion events."""

    event_plane_angle: float
    eccentricity: float


@dataclass(frozen=True)
class JetCuts:
    """Jet-level acceptance applied before dijet selection."""

    max_abs_eta: float = 2.0
    min_pt: float = 20.0

    def accepts(self, jet: Jet) -> bool:
        """Return True when the jet is inside both (strict) windows."""
        return jet.abs_eta < self.max_abs_eta and jet.pt > self.min_pt


@dataclass(frozen=True)
class DijetCuts:
    """Event-level cuts applied to the leading jet and its recoil partner."""

    min_leading_pt: float = 80.0
    back_to_back_window: float = math.pi / 8.0
    exclude_leading: bool = True


@dataclass(frozen=True)
class EventInput:
    """One event payload with its jets, optional heavy-ion metadata and weights."""

    event_id: str
    jets: tuple[Jet, ...]
    heavy_ion: HeavyIonInfo | None = None
    weights: tuple[float, ...] = (1.0,)

    def jets_by_pt(self, cuts: JetCuts | None = None) -> list[Jet]:
        """Return jets passing `cuts`, ordered by descending transverse momentum."""
        cuts = cuts or JetCuts()
        selected = [j for j in self.jets if cuts.accepts(j)]
        # Stable sort keeps the input order for equal-pT jets.
        return sorted(selected, key=lambda j: j.pt, reverse=True)


@dataclass(frozen=True)
class AnalysisConfig:
    """Run configuration for one dijet analysis pass."""

    output_path: str = DEFAULT_OUTPUT_PATH
    jet_cuts: JetCuts = field(default_factory=JetCuts)
    dijet_cuts: DijetCuts = field(default_factory=DijetCuts)
