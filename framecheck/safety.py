# framecheck/safety.py
"""
SAFETY & OPTIMIZATION: Utilization, Safety Factors, Suggestions
===============================================================

PURPOSE:
--------
After recovery every element has a combined stress. This module compares it
against an allowable stress and turns the ratios into:

- a per-element status (normal / medium / high utilization, low safety factor)
- a structure-wide safety summary (overall SF, critical elements, validity)
- optimization suggestions with estimated improvement fractions

ALLOWABLE STRESS:
-----------------
    allowable = strength × design_factor / average_load_factor

    strength            yield, else ultimate, else 250 MPa
    design_factor       0.6 steel, 0.45 concrete, 1.0 otherwise
    average_load_factor (dead + live) / 2 = 1.4 with default factors

    utilization   = combined / allowable
    safety factor = allowable / combined   (inf for an unloaded element)

Display values are clamped (utilization ≤ 2.0, safety factor ≥ 0.1);
classification and validity use the raw values.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Hashable, List

from .catalog import Material
from .config import AnalysisOptions
from .model import Structure
from .post import ElementStresses

# Classification thresholds
HIGH_UTILIZATION = 0.9
MEDIUM_UTILIZATION = 0.8
LOW_SAFETY_FACTOR = 1.5
CRITICAL_SAFETY_FACTOR = 2.0
MIN_VALID_SAFETY_FACTOR = 1.0

# Display clamps
UTILIZATION_DISPLAY_CAP = 2.0
SAFETY_FACTOR_DISPLAY_FLOOR = 0.1

# Suggestion thresholds
UNDERUTILIZED = 0.3
CRITICAL_UTILIZATION = 0.85
OVERDESIGNED_MEAN = 0.5
TARGET_UTILIZATION = 0.8
VARIANCE_SCALE = 0.25

STATUS_NORMAL = 'normal'
STATUS_MEDIUM = 'medium utilization'
STATUS_HIGH = 'high utilization'
STATUS_LOW_SF = 'low safety factor'


@dataclass(frozen=True)
class ElementSafety:
    """Safety check of one element."""
    element_id: Hashable
    combined_stress: float
    allowable_stress: float
    utilization: float
    safety_factor: float
    status: str
    recommendations: List[str] = field(default_factory=list)

    @property
    def display_utilization(self) -> float:
        return min(self.utilization, UTILIZATION_DISPLAY_CAP)

    @property
    def display_safety_factor(self) -> float:
        return max(self.safety_factor, SAFETY_FACTOR_DISPLAY_FLOOR)


@dataclass(frozen=True)
class OptimizationSuggestion:
    """
    One improvement opportunity.

    kind is 'material' or 'geometry'; priority 'low', 'medium' or 'high';
    expected_improvement is a fraction (0.15 = 15%).
    """
    kind: str
    priority: str
    description: str
    expected_improvement: float
    element_ids: List[Hashable] = field(default_factory=list)


@dataclass(frozen=True)
class SafetySummary:
    elements: Dict[Hashable, ElementSafety]
    overall_safety_factor: float
    average_utilization: float
    critical_elements: List[Hashable]
    recommendations: List[str]
    is_valid: bool


@dataclass(frozen=True)
class OptimizationSummary:
    suggestions: List[OptimizationSuggestion]
    material_efficiency: float
    structural_efficiency: float
    cost_optimization: float


def allowable_stress(material: Material, options: AnalysisOptions) -> float:
    """Allowable stress (Pa) of a material under the configured factors."""
    return material.strength * options.design_factor(material.kind) / options.average_load_factor


def classify(utilization: float, safety_factor: float) -> str:
    if safety_factor < LOW_SAFETY_FACTOR:
        return STATUS_LOW_SF
    if utilization > HIGH_UTILIZATION:
        return STATUS_HIGH
    if utilization > MEDIUM_UTILIZATION:
        return STATUS_MEDIUM
    return STATUS_NORMAL


def _element_recommendations(utilization: float, safety_factor: float) -> List[str]:
    notes = []
    if utilization > HIGH_UTILIZATION:
        notes.append("Consider a larger section or a higher material grade")
    elif utilization > MEDIUM_UTILIZATION:
        notes.append("Monitor this element for load changes")
    if safety_factor < LOW_SAFETY_FACTOR:
        notes.append("Design revision required: safety factor is low")
    return notes


def check_element(element_id: Hashable, stresses: ElementStresses, material: Material,
                  options: AnalysisOptions) -> ElementSafety:
    allowable = allowable_stress(material, options)
    combined = stresses.combined

    utilization = combined / allowable
    safety_factor = allowable / combined if combined > 0.0 else math.inf

    return ElementSafety(
        element_id=element_id,
        combined_stress=combined,
        allowable_stress=allowable,
        utilization=utilization,
        safety_factor=safety_factor,
        status=classify(utilization, safety_factor),
        recommendations=_element_recommendations(utilization, safety_factor),
    )


def analyze_safety(
    structure: Structure,
    stresses: Dict[Hashable, ElementStresses],
    options: AnalysisOptions,
) -> SafetySummary:
    """
    Safety check of every element plus the structure-wide summary.

    The structure is valid only when every element's safety factor > 1.0.
    """
    checks = {
        e.id: check_element(e.id, stresses[e.id], e.material, options)
        for e in structure.elements
    }
    values = list(checks.values())

    low_sf = [c for c in values if c.safety_factor < LOW_SAFETY_FACTOR]
    high_util = [c for c in values if c.utilization > MEDIUM_UTILIZATION]

    recommendations = []
    if low_sf:
        recommendations.append(f"{len(low_sf)} element(s) with a low safety factor need attention")
    if high_util:
        recommendations.append(f"{len(high_util)} element(s) with high utilization; monitor regularly")

    return SafetySummary(
        elements=checks,
        overall_safety_factor=min((c.safety_factor for c in values), default=math.inf),
        average_utilization=_mean([c.utilization for c in values]),
        critical_elements=[c.element_id for c in values if c.safety_factor < CRITICAL_SAFETY_FACTOR],
        recommendations=recommendations,
        is_valid=all(c.safety_factor > MIN_VALID_SAFETY_FACTOR for c in values),
    )


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _variance(values: List[float]) -> float:
    if not values:
        return 0.0
    m = _mean(values)
    return sum((v - m) ** 2 for v in values) / len(values)


def optimization_suggestions(safety: SafetySummary) -> List[OptimizationSuggestion]:
    """
    Suggestions in fixed order:

    1. utilization < 0.3  → reduce dimensions (material, medium, 15%)
    2. utilization > 0.85 → strengthen (geometry, high, 25%)
    3. mean utilization < 0.5 → over-designed overall (material, low, 20%)
    """
    checks = list(safety.elements.values())
    suggestions = []

    under = [c.element_id for c in checks if c.utilization < UNDERUTILIZED]
    if under:
        suggestions.append(OptimizationSuggestion(
            kind='material',
            priority='medium',
            description=f"{len(under)} under-utilized element(s); consider reducing dimensions",
            expected_improvement=0.15,
            element_ids=under,
        ))

    critical = [c.element_id for c in checks if c.utilization > CRITICAL_UTILIZATION]
    if critical:
        suggestions.append(OptimizationSuggestion(
            kind='geometry',
            priority='high',
            description=f"{len(critical)} critical element(s); strengthen or enlarge the section",
            expected_improvement=0.25,
            element_ids=critical,
        ))

    if checks and safety.average_utilization < OVERDESIGNED_MEAN:
        suggestions.append(OptimizationSuggestion(
            kind='material',
            priority='low',
            description="Structure is over-designed overall; material optimization is possible",
            expected_improvement=0.20,
        ))

    return suggestions


def analyze_optimization(safety: SafetySummary) -> OptimizationSummary:
    """
    Suggestions plus efficiency scores, all in [0, 1]:

    material_efficiency   = min(mean utilization / 0.8, 1)
    structural_efficiency = clamp(1 − variance(utilization) / 0.25, 0, 1)
    cost_optimization     = mean expected improvement of the suggestions
    """
    utilizations = [c.utilization for c in safety.elements.values()]
    suggestions = optimization_suggestions(safety)

    material_efficiency = min(_mean(utilizations) / TARGET_UTILIZATION, 1.0)
    structural_efficiency = max(0.0, min(1.0 - _variance(utilizations) / VARIANCE_SCALE, 1.0))
    cost = _mean([s.expected_improvement for s in suggestions])

    return OptimizationSummary(
        suggestions=suggestions,
        material_efficiency=material_efficiency,
        structural_efficiency=structural_efficiency,
        cost_optimization=cost,
    )
