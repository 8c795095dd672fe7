"""Run driver: owns the output table and feeds events through the selector."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Iterable

from .models import AnalysisConfig, EventInput
from .record import RECORD_FIELDS
from .selection import DijetSelector, RejectReason
from .writer import TableWriter

logger = logging.getLogger(__name__)


class AnalysisState(enum.Enum):
    """Lifecycle of one analysis run."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    FINALIZED = "finalized"


@dataclass(frozen=True)
class AnalysisSummary:
    """Counters reported at the end of a run."""

    output_path: str
    sink_open: bool
    n_events: int
    n_accepted: int
    cutflow: dict[str, int] = field(default_factory=dict)
    sink_error: str | None = None

    @property
    def n_rejected(self) -> int:
        return self.n_events - self.n_accepted


class DijetAnalysis:
    """Dijet geometrical-bias analysis with an explicit open/process/close lifecycle."""

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self.config = config or AnalysisConfig()
        self.selector = DijetSelector(
            jet_cuts=self.config.jet_cuts,
            dijet_cuts=self.config.dijet_cuts,
        )
        self._writer = TableWriter()
        self._state = AnalysisState.UNINITIALIZED
        self._sink_open = False
        self._n_events = 0
        self._n_accepted = 0
        self._cutflow: dict[str, int] = {}

    @property
    def state(self) -> AnalysisState:
        return self._state

    @property
    def n_events(self) -> int:
        return self._n_events

    @property
    def n_accepted(self) -> int:
        return self._n_accepted

    def open(self) -> bool:
        """Open the output table and reset counters; return sink availability."""
        if self._state is not AnalysisState.UNINITIALIZED:
            raise RuntimeError(f"Cannot open analysis in state '{self._state.value}'.")
        self._sink_open = self._writer.open(self.config.output_path)
        self._n_events = 0
        self._n_accepted = 0
        self._cutflow = {reason.value: 0 for reason in RejectReason}
        self._state = AnalysisState.READY
        return self._sink_open

    def process_event(self, event: EventInput) -> dict[str, float] | None:
        """Select one event and append its record; return the record or None."""
        if self._state is not AnalysisState.READY:
            raise RuntimeError(
                f"process_event requires an open analysis (state '{self._state.value}')."
            )
        self._n_events += 1
        outcome = self.selector.evaluate(event)
        if outcome.record is None:
            assert outcome.reason is not None
            self._cutflow[outcome.reason.value] += 1
            return None
        if not self._writer.header_written:
            self._writer.write_header(RECORD_FIELDS)
        self._writer.write_row(outcome.record)
        self._n_accepted += 1
        return outcome.record

    def close(self, aborted: bool = False) -> AnalysisSummary:
        """Release the output table and return the run summary.

        `aborted` marks a run interrupted by an exception, so no completion
        message is logged.
        """
        if self._state is AnalysisState.READY:
            try:
                self._writer.close()
            finally:
                self._state = AnalysisState.FINALIZED
            self._log_completion(aborted)
        elif self._state is AnalysisState.UNINITIALIZED:
            self._state = AnalysisState.FINALIZED
        return self.summary()

    def _log_completion(self, aborted: bool) -> None:
        counts = (self._n_accepted, self._n_events)
        if aborted:
            logger.warning("Run aborted (%d of %d events accepted so far).", *counts)
        elif not self._sink_open:
            logger.info("Run finished without output (%d of %d events accepted).", *counts)
        elif self._writer.error is not None:
            logger.warning(
                "Run finished but %s is incomplete (%d of %d events accepted).",
                self.config.output_path,
                *counts,
            )
        else:
            logger.info(
                "Everything written to %s (%d of %d events accepted).",
                self.config.output_path,
                *counts,
            )

    def summary(self) -> AnalysisSummary:
        error = self._writer.error
        return AnalysisSummary(
            output_path=str(self.config.output_path),
            sink_open=self._sink_open,
            n_events=self._n_events,
            n_accepted=self._n_accepted,
            cutflow=dict(self._cutflow),
            sink_error=None if error is None or not self._sink_open else str(error),
        )

    def run(self, events: Iterable[EventInput]) -> AnalysisSummary:
        """Process all `events` in order and finalize the run."""
        self.open()
        try:
            for event in events:
                self.process_event(event)
        except BaseException:
            self.close(aborted=True)
            raise
        return self.close()

    def __enter__(self) -> "DijetAnalysis":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close(aborted=exc_type is not None)
