"""Unit tests for the analysis driver lifecycle and output table."""

from __future__ import annotations

import math
import os
import tempfile
import unittest
from pathlib import Path

from jetbias import (
    AnalysisConfig,
    AnalysisState,
    DijetAnalysis,
    EventInput,
    HeavyIonInfo,
    Jet,
    RECORD_FIELDS,
)


def _dijet_event(event_id: str, lead_pt: float = 100.0, heavy_ion=None) -> EventInput:
    """Event with a leading jet at phi=0 and a recoil jet at phi=pi."""
    return EventInput(
        event_id=event_id,
        jets=(Jet(pt=lead_pt, eta=0.0, phi=0.0), Jet(pt=60.0, eta=0.1, phi=math.pi)),
        heavy_ion=heavy_ion,
    )


def _monojet_event(event_id: str) -> EventInput:
    return EventInput(event_id=event_id, jets=(Jet(pt=150.0, eta=0.0, phi=1.0),))


def _unpaired_event(event_id: str) -> EventInput:
    return EventInput(
        event_id=event_id,
        jets=(Jet(pt=120.0, eta=0.0, phi=0.0), Jet(pt=90.0, eta=0.0, phi=1.5)),
    )


class TestDijetAnalysis(unittest.TestCase):
    """Validate counters, cutflow, header handling, and sink failures."""

    def test_run_writes_one_row_per_accepted_event(self) -> None:
        """Only accepted events produce rows; rejections feed the cutflow."""
        events = [
            _dijet_event("e0"),
            _monojet_event("e1"),
            _dijet_event("e2", lead_pt=50.0),
            _unpaired_event("e3"),
            _dijet_event("e4"),
        ]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "eventdata.dat"
            summary = DijetAnalysis(AnalysisConfig(output_path=str(path))).run(events)
            lines = path.read_text(encoding="utf-8").splitlines()

        self.assertTrue(summary.sink_open)
        self.assertEqual(summary.n_events, 5)
        self.assertEqual(summary.n_accepted, 2)
        self.assertEqual(summary.n_rejected, 3)
        self.assertEqual(
            summary.cutflow,
            {"too_few_jets": 1, "soft_leading_jet": 1, "no_back_to_back": 1},
        )
        self.assertEqual(sum(summary.cutflow.values()), summary.n_rejected)
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[0], "\t".join(RECORD_FIELDS))

    def test_header_is_stable_when_metadata_appears_later(self) -> None:
        """The first event lacking metadata does not shrink the header."""
        events = [
            _dijet_event("e0"),
            _dijet_event("e1", heavy_ion=HeavyIonInfo(event_plane_angle=1.2, eccentricity=0.4)),
        ]
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "eventdata.dat"
            DijetAnalysis(AnalysisConfig(output_path=str(path))).run(events)
            lines = path.read_text(encoding="utf-8").splitlines()

        self.assertEqual(lines.count("\t".join(RECORD_FIELDS)), 1)
        first = lines[1].split("\t")
        second = lines[2].split("\t")
        self.assertEqual(len(first), len(second))
        self.assertEqual(first[:2], ["nan", "nan"])
        self.assertEqual(second[:2], ["1.2", "0.4"])

    def test_unopenable_sink_writes_nothing_and_completes(self) -> None:
        """A failed sink degrades the run to processing without output."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "no_such_dir" / "eventdata.dat"
            analysis = DijetAnalysis(AnalysisConfig(output_path=str(path)))
            with self.assertLogs("jetbias.writer", level="WARNING"):
                summary = analysis.run([_dijet_event("e0"), _dijet_event("e1")])
            self.assertFalse(path.exists())

        self.assertFalse(summary.sink_open)
        self.assertEqual(summary.n_accepted, 2)
        self.assertIs(analysis.state, AnalysisState.FINALIZED)

    def test_no_accepted_events_leaves_empty_file(self) -> None:
        """The header is only written once an event is accepted."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "eventdata.dat"
            summary = DijetAnalysis(AnalysisConfig(output_path=str(path))).run(
                [_monojet_event("e0")]
            )
            self.assertEqual(path.read_bytes(), b"")
        self.assertEqual(summary.n_accepted, 0)

    def test_lifecycle_is_enforced(self) -> None:
        """Events can only be processed between open and close."""
        with tempfile.TemporaryDirectory() as tmpdir:
            analysis = DijetAnalysis(AnalysisConfig(output_path=str(Path(tmpdir) / "t.dat")))
            self.assertIs(analysis.state, AnalysisState.UNINITIALIZED)
            with self.assertRaises(RuntimeError):
                analysis.process_event(_dijet_event("e0"))
            analysis.open()
            self.assertIs(analysis.state, AnalysisState.READY)
            with self.assertRaises(RuntimeError):
                analysis.open()
            record = analysis.process_event(_dijet_event("e1"))
            self.assertIsNotNone(record)
            first = analysis.close()
            second = analysis.close()
            self.assertEqual(first, second)
            with self.assertRaises(RuntimeError):
                analysis.process_event(_dijet_event("e2"))

    def test_context_manager_opens_and_closes(self) -> None:
        """Using the driver as a context manager finalizes the table."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "eventdata.dat"
            with DijetAnalysis(AnalysisConfig(output_path=str(path))) as analysis:
                self.assertIsNone(analysis.process_event(_monojet_event("e0")))
                analysis.process_event(_dijet_event("e1"))
            self.assertIs(analysis.state, AnalysisState.FINALIZED)
            self.assertEqual(analysis.n_events, 2)
            self.assertEqual(analysis.n_accepted, 1)
            self.assertEqual(len(path.read_text(encoding="utf-8").splitlines()), 2)

    @unittest.skipUnless(os.path.exists("/dev/full"), "requires /dev/full")
    def test_full_device_degrades_to_no_output(self) -> None:
        """A sink that fails after opening still lets the run finish."""
        analysis = DijetAnalysis(AnalysisConfig(output_path="/dev/full"))
        with self.assertLogs("jetbias.writer", level="WARNING"):
            summary = analysis.run([_dijet_event(f"e{i}") for i in range(3)])

        self.assertIs(analysis.state, AnalysisState.FINALIZED)
        self.assertTrue(summary.sink_open)
        self.assertEqual(summary.n_accepted, 3)
        self.assertIsNotNone(summary.sink_error)

    def test_aborted_run_does_not_report_completion(self) -> None:
        """An exception mid-run finalizes the driver without a success message."""
        corrupt = EventInput(
            event_id="bad",
            jets=(Jet(pt=100.0, eta=0.0, phi=0.0), Jet(pt=60.0, eta=0.0, phi=math.pi)),
            weights=(),
        )
        with tempfile.TemporaryDirectory() as tmpdir:
            analysis = DijetAnalysis(AnalysisConfig(output_path=str(Path(tmpdir) / "t.dat")))
            with self.assertLogs("jetbias.analysis", level="INFO") as logs:
                with self.assertRaises(ValueError):
                    analysis.run([_dijet_event("e0"), corrupt])

        messages = [record.getMessage() for record in logs.records]
        self.assertTrue(any("aborted" in m for m in messages))
        self.assertFalse(any("Everything written" in m for m in messages))
        self.assertIs(analysis.state, AnalysisState.FINALIZED)
        self.assertEqual(analysis.n_accepted, 1)


if __name__ == "__main__":
    unittest.main()
