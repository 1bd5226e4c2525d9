# framecheck/checks - Code compliance rule sets
"""Compliance checks per SNI 1726 / 1727 / 2847 / 1729, plus ACI 318 and AISC 360 notes."""

import logging
from typing import Callable, Dict, Optional

from ..config import AnalysisOptions
from ..model import Structure
from .common import (
    ComplianceResult,
    ComplianceReport,
    building_height,
    max_span,
    structural_irregularity,
)
from .seismic import check_seismic
from .loads import check_loads
from .concrete import check_concrete
from .steel import check_steel
from .international import check_aci318, check_aisc360

logger = logging.getLogger(__name__)

RuleSet = Callable[..., ComplianceResult]

RULE_SETS: Dict[str, RuleSet] = {
    'seismic': check_seismic,
    'loads': check_loads,
    'concrete': check_concrete,
    'steel': check_steel,
    'aci318': check_aci318,
    'aisc360': check_aisc360,
}


def check_compliance(structure: Structure, result, options: Optional[AnalysisOptions] = None) -> ComplianceReport:
    """
    Run every rule set enabled in options.rule_sets.

    Overall compliance is the AND of the enabled sets' compliant flags.
    """
    options = options or AnalysisOptions()
    results = {}
    for name in options.rule_sets:
        results[name] = RULE_SETS[name](structure, result, options)
        if not results[name].compliant:
            logger.info("%s: %d violation(s)", results[name].code, len(results[name].violations))
    return ComplianceReport(results)


__all__ = [
    'ComplianceResult',
    'ComplianceReport',
    'RULE_SETS',
    'check_compliance',
    'check_seismic',
    'check_loads',
    'check_concrete',
    'check_steel',
    'check_aci318',
    'check_aisc360',
    'building_height',
    'max_span',
    'structural_irregularity',
]
