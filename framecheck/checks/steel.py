# framecheck/checks/steel.py
"""Steel material and deflection checks per SNI 1729."""

from typing import Optional

from ..catalog import FALLBACK_STRENGTH
from ..config import AnalysisOptions
from ..model import Structure
from .common import ComplianceResult, materials_of_kind, max_span

CODE = 'SNI 1729'

MIN_FY = 240.0   # MPa
HIGH_FY = 550.0  # MPa


def steel_yield_mpa(material) -> float:
    """fy in MPa, 250 MPa when the material gives none."""
    return (material.yield_strength or FALLBACK_STRENGTH) / 1e6


def check_steel(structure: Structure, result, options: Optional[AnalysisOptions] = None) -> ComplianceResult:
    """
    SNI 1729 rule set.

    Per steel material:
        fy < 240 MPa → violation
        fy > 550 MPa → warning (high-strength steel)

    When the structure contains steel:
        max displacement > max span / 300 → violation
        buckling and connection requirements are listed
    """
    options = options or AnalysisOptions()
    requirements, violations, warnings = [], [], []

    steel = materials_of_kind(structure, 'steel')
    for material in steel:
        fy = steel_yield_mpa(material)
        if fy < MIN_FY:
            violations.append(f"{material.name}: yield strength {fy:.0f} MPa < minimum {MIN_FY:g} MPa")
        elif fy > HIGH_FY:
            warnings.append(f"{material.name}: high-strength steel {fy:.0f} MPa needs special verification")
        requirements.append(f"Steel BJ {fy:.0f} with fy = {fy:.0f} MPa")

    if steel:
        requirements.append("Lateral-torsional buckling check for beams")
        requirements.append("Column buckling check with effective length factors")
        requirements.append("Local buckling check of compression elements")
        requirements.append("Bolted connections: minimum M16")
        requirements.append("Minimum bolt spacing: 3d")
        requirements.append("Minimum edge distance: 1.5d")

        limit = max_span(structure) / options.deflection_limits['steel']
        if result.max_displacement > limit:
            violations.append(
                f"Steel deflection {result.max_displacement * 1000:.1f} mm > limit {limit * 1000:.1f} mm"
            )

    return ComplianceResult(CODE, requirements, violations, warnings)
