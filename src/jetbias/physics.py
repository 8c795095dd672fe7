"""Kinematic helpers for building dijet observables."""

from __future__ import annotations

import math

from .models import Jet


def raw_delta_phi(a: Jet, b: Jet) -> float:
    """Absolute azimuthal difference without wrapping into `[0, pi]`."""
    return abs(a.phi - b.phi)


def is_back_to_back(a: Jet, b: Jet, window: float = math.pi / 8.0) -> bool:
    """True when the raw azimuthal difference lies strictly within `window` of pi."""
    return abs(raw_delta_phi(a, b) - math.pi) < window


def jet_angle_degrees(a: Jet, b: Jet) -> float:
    """Raw azimuthal difference in degrees (may exceed 180)."""
    return raw_delta_phi(a, b) * 180.0 / math.pi


def dijet_asymmetry(leading: Jet, subleading: Jet) -> float:
    """Momentum asymmetry `Aj = (pT1 - pT2) / (pT1 + pT2)`."""
    e1 = leading.pt
    e2 = subleading.pt
    total = e1 + e2
    if total == 0.0:
        return math.nan
    return (e1 - e2) / total
