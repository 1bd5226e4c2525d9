# framecheck/checks/common.py
"""Shared result types and geometry helpers for the compliance rule sets."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..model import Structure

# Max span used when a structure has no measurable elements (m)
DEFAULT_SPAN = 10.0

# Elevations closer than this belong to the same level (m)
LEVEL_TOLERANCE = 1e-6


@dataclass(frozen=True)
class ComplianceResult:
    """Outcome of one rule set. Compliant means no violations; warnings do not count."""
    code: str
    requirements: List[str] = field(default_factory=list)
    violations: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def compliant(self) -> bool:
        return not self.violations

    def as_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code,
            'compliant': self.compliant,
            'requirements': list(self.requirements),
            'violations': list(self.violations),
            'warnings': list(self.warnings),
        }


@dataclass(frozen=True)
class ComplianceReport:
    """Results of every enabled rule set, keyed by rule-set name."""
    results: Dict[str, ComplianceResult] = field(default_factory=dict)

    @property
    def compliant(self) -> bool:
        return all(r.compliant for r in self.results.values())

    def __getitem__(self, key: str) -> ComplianceResult:
        return self.results[key]

    def as_dict(self) -> Dict[str, Any]:
        return {
            'compliant': self.compliant,
            'rule_sets': {k: r.as_dict() for k, r in self.results.items()},
        }


def building_height(structure: Structure) -> float:
    return structure.height()


def max_span(structure: Structure) -> float:
    """Longest element length; DEFAULT_SPAN when there is none."""
    nodes = structure.node_map()
    longest = 0.0
    for e in structure.elements:
        a, b = nodes.get(e.ni), nodes.get(e.nj)
        if a is not None and b is not None:
            longest = max(longest, math.dist(a.coords, b.coords))
    return longest or DEFAULT_SPAN


def structural_irregularity(structure: Structure) -> float:
    """
    Vertical setback ratio over the elevation levels.

    Nodes are grouped by elevation; each level's plan footprint is the area
    of its x/y bounding box. The metric is 1 − min/max over the levels with
    a non-zero footprint, and 0 when fewer than two such levels exist.
    """
    levels: Dict[float, List] = {}
    for node in structure.nodes:
        key = round(node.z / LEVEL_TOLERANCE) * LEVEL_TOLERANCE
        levels.setdefault(key, []).append(node)

    areas = []
    for nodes in levels.values():
        xs = [n.x for n in nodes]
        ys = [n.y for n in nodes]
        area = (max(xs) - min(xs)) * (max(ys) - min(ys))
        if area > 0.0:
            areas.append(area)

    if len(areas) < 2:
        return 0.0
    return 1.0 - min(areas) / max(areas)


def materials_of_kind(structure: Structure, kind: str) -> List:
    return [m for m in structure.materials() if m.kind.lower() == kind]
