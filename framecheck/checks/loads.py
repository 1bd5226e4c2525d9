# framecheck/checks/loads.py
"""Load definition and combination checks per SNI 1727."""

from typing import Optional

from ..config import AnalysisOptions
from ..model import LOAD_CASES, Structure
from .common import ComplianceResult

CODE = 'SNI 1727'


def check_loads(structure: Structure, result, options: Optional[AnalysisOptions] = None) -> ComplianceResult:
    """
    SNI 1727 rule set.

    A structure must define at least one dead and one live load; a missing
    case is a violation. Loads tagged with a case outside dead/live/wind/
    seismic are reported as warnings. The load-combination requirements list
    the configured factors.
    """
    options = options or AnalysisOptions()
    requirements, violations, warnings = [], [], []

    cases = {load.case for load in structure.loads}
    if 'dead' not in cases:
        violations.append("Dead load must be defined")
    if 'live' not in cases:
        violations.append("Live load must be defined")

    for case in sorted(cases - set(LOAD_CASES)):
        warnings.append(f"Load case '{case}' is not part of the SNI 1727 combinations")

    factors = options.load_factors
    requirements.append("Load combinations per SNI 1727 must be used")
    requirements.append(
        "Load factors: Dead={:g}, Live={:g}, Wind={:g}".format(
            factors.get('dead', 1.2), factors.get('live', 1.6), factors.get('wind', 1.6))
    )

    return ComplianceResult(CODE, requirements, violations, warnings)
