"""Event selection for back-to-back high-pT dijet pairs."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Sequence

from .models import DijetCuts, EventInput, Jet, JetCuts
from .physics import dijet_asymmetry, is_back_to_back, jet_angle_degrees
from .record import new_record

logger = logging.getLogger(__name__)


class RejectReason(str, enum.Enum):
    """Why an event produced no output row."""

    TOO_FEW_JETS = "too_few_jets"
    SOFT_LEADING_JET = "soft_leading_jet"
    NO_BACK_TO_BACK = "no_back_to_back"


@dataclass(frozen=True)
class SelectionOutcome:
    """Result of evaluating one event: either a record or a rejection reason."""

    record: dict[str, float] | None
    reason: RejectReason | None = None
    leading: Jet | None = None
    partner: Jet | None = None

    @property
    def accepted(self) -> bool:
        return self.record is not None


@dataclass
class DijetSelector:
    """Select the leading jet and its first back-to-back partner in pT order."""

    jet_cuts: JetCuts = field(default_factory=JetCuts)
    dijet_cuts: DijetCuts = field(default_factory=DijetCuts)

    def select(self, event: EventInput) -> dict[str, float] | None:
        """Return the populated record for an accepted event, otherwise None."""
        return self.evaluate(event).record

    def evaluate(self, event: EventInput) -> SelectionOutcome:
        """Apply the dijet selection and derive the per-event observables.

        Workflow:
        1. Copy heavy-ion geometry (event-plane angle, eccentricity) if present.
        2. Retrieve jets inside the jet cuts, ordered by descending pT.
        3. Require at least two jets and a hard leading jet.
        4. Find the first jet back-to-back with the leading one.
        5. Fill pT, angle, asymmetry and event weight.
        """
        record = new_record()
        if event.heavy_ion is not None:
            record["Polar"] = float(event.heavy_ion.event_plane_angle)
            record["JProdR"] = float(event.heavy_ion.eccentricity)

        jets = event.jets_by_pt(self.jet_cuts)
        self._check_pt_ordering(jets, event.event_id)
        if len(jets) < 2:
            return self._reject(event, RejectReason.TOO_FEW_JETS)

        j1 = jets[0]
        if j1.pt < self.dijet_cuts.min_leading_pt:
            return self._reject(event, RejectReason.SOFT_LEADING_JET, leading=j1)

        j2 = self.find_partner(j1, jets)
        if j2 is None:
            return self._reject(event, RejectReason.NO_BACK_TO_BACK, leading=j1)

        record["Jet1_pT"] = j1.pt
        record["Jet2_pT"] = j2.pt
        record["JetAngle"] = jet_angle_degrees(j1, j2)
        record["Jet1_Ang"] = j1.phi
        record["Aj"] = dijet_asymmetry(j1, j2)
        record["Weight"] = self._first_weight(event)
        logger.debug(
            "Event %s accepted: pT1=%g pT2=%g angle=%g Aj=%g",
            event.event_id,
            record["Jet1_pT"],
            record["Jet2_pT"],
            record["JetAngle"],
            record["Aj"],
        )
        return SelectionOutcome(record=record, leading=j1, partner=j2)

    def find_partner(self, leading: Jet, jets: Sequence[Jet]) -> Jet | None:
        """Return the highest-pT jet within the back-to-back window of `leading`."""
        candidates = jets[1:] if self.dijet_cuts.exclude_leading else jets
        window = self.dijet_cuts.back_to_back_window
        for jet in candidates:
            # Jets are pT ordered, so the first match is the hardest recoil jet.
            if is_back_to_back(leading, jet, window):
                return jet
        return None

    @staticmethod
    def _reject(
        event: EventInput, reason: RejectReason, leading: Jet | None = None
    ) -> SelectionOutcome:
        logger.debug("Event %s rejected: %s", event.event_id, reason.value)
        return SelectionOutcome(record=None, reason=reason, leading=leading)

    @staticmethod
    def _check_pt_ordering(jets: Sequence[Jet], event_id: str) -> None:
        """Validate the descending-pT contract of the jet source."""
        for prev, cur in zip(jets, jets[1:]):
            if cur.pt > prev.pt:
                raise ValueError(
                    f"Jets for event '{event_id}' are not ordered by descending pT."
                )

    @staticmethod
    def _first_weight(event: EventInput) -> float:
        if not event.weights:
            raise ValueError(f"Event '{event.event_id}' carries no weights.")
        return float(event.weights[0])
