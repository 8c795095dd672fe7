"""Public package exports for the dijet geometrical-bias analysis."""

from .analysis import AnalysisState, AnalysisSummary, DijetAnalysis
from .models import (
    AnalysisConfig,
    DijetCuts,
    EventInput,
    HeavyIonInfo,
    Jet,
    JetCuts,
)
from .record import RECORD_FIELDS, new_record, record_values
from .selection import DijetSelector, RejectReason, SelectionOutcome
from .writer import TableWriter

__all__ = [
    "DijetAnalysis",
    "AnalysisState",
    "AnalysisSummary",
    "AnalysisConfig",
    "Jet",
    "HeavyIonInfo",
    "EventInput",
    "JetCuts",
    "DijetCuts",
    "RECORD_FIELDS",
    "new_record",
    "record_values",
    "DijetSelector",
    "RejectReason",
    "SelectionOutcome",
    "TableWriter",
]
