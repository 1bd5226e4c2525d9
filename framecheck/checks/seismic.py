# framecheck/checks/seismic.py
"""Seismic checks per SNI 1726 (height, irregularity, drift)."""

from typing import Optional

from ..config import AnalysisOptions
from ..model import Structure
from .common import ComplianceResult, building_height, structural_irregularity

CODE = 'SNI 1726'


def check_seismic(structure: Structure, result, options: Optional[AnalysisOptions] = None) -> ComplianceResult:
    """
    SNI 1726 rule set.

    - height > 60          → requirement (dynamic analysis) + warning
    - irregularity > 0.3   → requirement (3D analysis) + warning
    - max displacement / height > 0.02 → violation (skipped when height is 0)

    Args:
        structure: The analysed structure
        result: Anything with a `max_displacement` attribute
        options: Limits; defaults when None

    Returns:
        ComplianceResult
    """
    options = options or AnalysisOptions()
    requirements, violations, warnings = [], [], []

    height = building_height(structure)
    if height > options.max_height:
        requirements.append(f"Dynamic analysis required for buildings taller than {options.max_height:g} m")
        warnings.append(f"Building height {height:.1f} m requires a dedicated seismic analysis")

    irregularity = structural_irregularity(structure)
    if irregularity > options.max_irregularity:
        requirements.append(
            f"3D analysis required for irregularity above {options.max_irregularity * 100:.0f}%"
        )
        warnings.append(f"Structural irregularity: {irregularity * 100:.1f}%")

    if height > 0.0:
        drift = result.max_displacement / height
        if drift > options.max_drift_ratio:
            violations.append(
                f"Drift ratio {drift * 100:.2f}% exceeds the {options.max_drift_ratio * 100:g}% limit"
            )

    return ComplianceResult(CODE, requirements, violations, warnings)
