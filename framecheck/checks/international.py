# framecheck/checks/international.py
"""Informational ACI 318 and AISC 360 rule sets (requirements only, never violations)."""

from typing import Optional

from ..config import AnalysisOptions
from ..model import Structure
from .common import ComplianceResult


def check_aci318(structure: Structure, result, options: Optional[AnalysisOptions] = None) -> ComplianceResult:
    return ComplianceResult('ACI 318', requirements=[
        "ACI 318: Load factors and strength reduction factors",
        "ACI 318: Minimum reinforcement requirements",
        "ACI 318: Deflection and crack control",
    ])


def check_aisc360(structure: Structure, result, options: Optional[AnalysisOptions] = None) -> ComplianceResult:
    return ComplianceResult('AISC 360', requirements=[
        "AISC 360: Steel design requirements",
        "AISC 341: Seismic provisions for steel buildings",
    ])
