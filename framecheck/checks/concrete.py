# framecheck/checks/concrete.py
"""Concrete material and deflection checks per SNI 2847."""

from typing import Optional

from ..config import AnalysisOptions
from ..model import Structure
from .common import ComplianceResult, materials_of_kind, max_span

CODE = 'SNI 2847'

MIN_FC = 20.0   # MPa
HIGH_FC = 80.0  # MPa


def concrete_strength_mpa(material) -> float:
    """f'c in MPa: ultimate strength, else yield strength, else 0."""
    fc = material.ultimate_strength or material.yield_strength or 0.0
    return fc / 1e6


def check_concrete(structure: Structure, result, options: Optional[AnalysisOptions] = None) -> ComplianceResult:
    """
    SNI 2847 rule set.

    Per concrete material:
        fc < 20 MPa → violation
        fc > 80 MPa → warning (high-strength concrete)

    When the structure contains concrete:
        max displacement > max span / 250 → violation
    """
    options = options or AnalysisOptions()
    requirements, violations, warnings = [], [], []

    concrete = materials_of_kind(structure, 'concrete')
    for material in concrete:
        fc = concrete_strength_mpa(material)
        if fc < MIN_FC:
            violations.append(f"{material.name}: compressive strength {fc:.1f} MPa < minimum {MIN_FC:g} MPa")
        elif fc > HIGH_FC:
            warnings.append(f"{material.name}: high-strength concrete {fc:.1f} MPa needs special provisions")
        requirements.append(f"Concrete K-{round(fc / 1.25)} with fc' = {fc:.1f} MPa")

    if concrete:
        limit = max_span(structure) / options.deflection_limits['concrete']
        if result.max_displacement > limit:
            violations.append(
                f"Deflection {result.max_displacement * 1000:.1f} mm > limit {limit * 1000:.1f} mm"
            )

        requirements.append("Minimum reinforcement: ρmin = 1.4/fy")
        requirements.append("Maximum reinforcement: ρmax = 0.75 × ρb")
        requirements.append("Minimum concrete cover per SNI 2847 tables")
        requirements.append("Crack control: crack width < 0.3 mm in normal exposure")

    return ComplianceResult(CODE, requirements, violations, warnings)
