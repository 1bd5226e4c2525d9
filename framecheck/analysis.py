# framecheck/analysis.py
"""
ANALYSIS ORCHESTRATOR: One Call from Structure to Result
========================================================

PURPOSE:
--------
analyze() sequences the whole linear static pipeline and returns one
consolidated, frozen AnalysisResult:

    VALIDATING → ASSEMBLING → BOUNDARY_CONDITIONS → SOLVING
              → RECOVERING → COMPLIANCE_CHECKING → DONE

FAILURE MODES:
--------------
- Malformed structure: ValidationError is raised during VALIDATING, before
  any matrix is built.
- CG stops at max_iterations, or on a singular (under-constrained)
  system: NOT fatal. The pipeline continues with converged=False, a
  ConvergenceWarning is issued through `warnings`, and the message is
  recorded in result.warnings.
- NaN/inf during SOLVING, or cancellation: the result is FAILED with
  zero-filled displacements, forces and stresses and the message in
  result.errors. Zeros are never reported as a valid solution.

Nothing is cached between calls; analyze() is safe to run concurrently for
different structures.

USAGE:
------
    from framecheck import analyze, AnalysisOptions

    result = analyze(structure, AnalysisOptions(include_shear_deformation=False))
    print(result.status, result.max_displacement)
    print(result.compliance.compliant)
"""

import logging
import math
import threading
import time
import warnings
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Hashable, List, Optional, Tuple

from .checks import ComplianceReport, check_compliance
from .config import AnalysisOptions
from .kernel.assemble import assemble_global_F, assemble_global_K, element_contributions
from .kernel.boundary import apply_boundary_conditions
from .kernel.dof import DOFManager
from .kernel.solve import ConvergenceWarning, NumericalError, SolverCancelled, solve_cg
from .model import Structure, validate_structure
from .post import (
    ZERO_FORCES,
    ZERO_STRESSES,
    ElementForces,
    ElementStresses,
    NodeDisplacement,
    compute_nodal_displacements,
    compute_reactions,
    max_combined_stress,
    max_displacement,
    recover_element_results,
)
from .safety import OptimizationSummary, SafetySummary, analyze_optimization, analyze_safety

logger = logging.getLogger(__name__)

STATUS_SUCCESS = 'success'
STATUS_WARNING = 'warning'
STATUS_FAILED = 'failed'


class AnalysisStage(Enum):
    VALIDATING = 'validating'
    ASSEMBLING = 'assembling'
    BOUNDARY_CONDITIONS = 'boundary_conditions'
    SOLVING = 'solving'
    RECOVERING = 'recovering'
    COMPLIANCE_CHECKING = 'compliance_checking'
    DONE = 'done'
    FAILED = 'failed'


@dataclass(frozen=True)
class PerformanceInfo:
    solution_time: float = 0.0   # seconds, whole pipeline
    matrix_size: int = 0         # ndof
    nonzeros: int = 0            # stored entries of K


@dataclass(frozen=True)
class AnalysisResult:
    """
    Consolidated outcome of one analyze() call.

    displacements, forces and stresses always have one entry per node /
    element, also for FAILED results (zero-filled).
    """
    displacements: Dict[Hashable, NodeDisplacement]
    forces: Dict[Hashable, ElementForces]
    stresses: Dict[Hashable, ElementStresses]
    status: str
    stage: AnalysisStage
    is_valid: bool
    converged: bool
    iterations: int
    residual: float
    max_displacement: float = 0.0
    max_stress: float = 0.0
    reactions: Dict[Hashable, Tuple[float, ...]] = field(default_factory=dict)
    safety: Optional[SafetySummary] = None
    optimization: Optional[OptimizationSummary] = None
    compliance: Optional[ComplianceReport] = None
    performance: PerformanceInfo = field(default_factory=PerformanceInfo)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.stage is AnalysisStage.FAILED

    @property
    def compliant(self) -> bool:
        return self.compliance is not None and self.compliance.compliant

    def as_dict(self) -> Dict[str, Any]:
        """Plain JSON-ready form; infinite safety factors become None."""
        return {
            'status': self.status,
            'stage': self.stage.value,
            'is_valid': self.is_valid,
            'converged': self.converged,
            'iterations': self.iterations,
            'residual': self.residual,
            'max_displacement': self.max_displacement,
            'max_stress': self.max_stress,
            'displacements': [dict(node=k, **v.as_dict()) for k, v in self.displacements.items()],
            'forces': [dict(element=k, **v.as_dict()) for k, v in self.forces.items()],
            'stresses': [dict(element=k, **v.as_dict()) for k, v in self.stresses.items()],
            'reactions': [{'node': k, 'values': list(v)} for k, v in self.reactions.items()],
            'safety': _safety_dict(self.safety),
            'optimization': _optimization_dict(self.optimization),
            'compliance': self.compliance.as_dict() if self.compliance else None,
            'performance': {
                'solution_time': self.performance.solution_time,
                'matrix_size': self.performance.matrix_size,
                'nonzeros': self.performance.nonzeros,
            },
            'warnings': list(self.warnings),
            'errors': list(self.errors),
        }


def _finite(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def _safety_dict(safety: Optional[SafetySummary]) -> Optional[Dict[str, Any]]:
    if safety is None:
        return None
    return {
        'overall_safety_factor': _finite(safety.overall_safety_factor),
        'average_utilization': safety.average_utilization,
        'critical_elements': list(safety.critical_elements),
        'recommendations': list(safety.recommendations),
        'is_valid': safety.is_valid,
        'elements': [
            {
                'element': c.element_id,
                'utilization': c.display_utilization,
                'safety_factor': _finite(c.display_safety_factor),
                'allowable_stress': c.allowable_stress,
                'status': c.status,
                'recommendations': list(c.recommendations),
            }
            for c in safety.elements.values()
        ],
    }


def _optimization_dict(opt: Optional[OptimizationSummary]) -> Optional[Dict[str, Any]]:
    if opt is None:
        return None
    return {
        'material_efficiency': opt.material_efficiency,
        'structural_efficiency': opt.structural_efficiency,
        'cost_optimization': opt.cost_optimization,
        'suggestions': [
            {
                'type': s.kind,
                'priority': s.priority,
                'description': s.description,
                'expected_improvement': s.expected_improvement,
                'elements': list(s.element_ids),
            }
            for s in opt.suggestions
        ],
    }


def _failed_result(structure: Structure, message: str, iterations: int,
                   performance: PerformanceInfo) -> AnalysisResult:
    zero = NodeDisplacement(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
    return AnalysisResult(
        displacements={n.id: zero for n in structure.nodes},
        forces={e.id: ZERO_FORCES for e in structure.elements},
        stresses={e.id: ZERO_STRESSES for e in structure.elements},
        status=STATUS_FAILED,
        stage=AnalysisStage.FAILED,
        is_valid=False,
        converged=False,
        iterations=iterations,
        residual=0.0,
        performance=performance,
        errors=[message],
    )


def analyze(
    structure: Structure,
    options: Optional[AnalysisOptions] = None,
    cancel_event: Optional[threading.Event] = None,
) -> AnalysisResult:
    """
    Run a linear static analysis with safety and compliance checks.

    Args:
        structure: Nodes, elements and loads; not modified
        options: AnalysisOptions; defaults when None
        cancel_event: Optional threading.Event; when set, CG stops at the next
            iteration boundary and the result is FAILED

    Returns:
        AnalysisResult (status 'success', 'warning' or 'failed')

    Raises:
        ValidationError: Malformed structure (before any matrix work)
    """
    options = options or AnalysisOptions()
    started = time.perf_counter()

    logger.debug("Stage %s", AnalysisStage.VALIDATING.value)
    validate_structure(structure)

    logger.debug("Stage %s", AnalysisStage.ASSEMBLING.value)
    dof = DOFManager.for_structure(structure)
    K = assemble_global_K(
        dof.ndof, element_contributions(structure, dof, options.include_shear_deformation)
    )
    F = assemble_global_F(structure, dof)

    logger.debug("Stage %s", AnalysisStage.BOUNDARY_CONDITIONS.value)
    K_bc, F_bc = apply_boundary_conditions(K, F, structure.constrained_dofs(), options.bc_method)

    logger.debug("Stage %s", AnalysisStage.SOLVING.value)
    try:
        solution = solve_cg(
            K_bc, F_bc,
            max_iterations=options.max_iterations,
            tolerance=options.tolerance,
            cancel_event=cancel_event,
            relative=options.relative_tolerance,
        )
    except (NumericalError, SolverCancelled) as exc:
        logger.error("Analysis failed during solve: %s", exc)
        performance = PerformanceInfo(time.perf_counter() - started, dof.ndof, K.nnz)
        return _failed_result(structure, str(exc), exc.iteration, performance)

    notes = []
    if not solution.converged:
        message = (
            f"Solver did not converge in {solution.iterations} iterations "
            f"(residual {solution.residual:.3e}, tolerance {options.tolerance:.1e})"
        )
        if solution.iterations < options.max_iterations:
            message += "; the stiffness matrix is singular, the structure may be under-constrained"
        warnings.warn(message, ConvergenceWarning, stacklevel=2)
        notes.append(message)

    logger.debug("Stage %s", AnalysisStage.RECOVERING.value)
    u = solution.solution
    displacements = compute_nodal_displacements(structure, dof, u)
    forces, stresses = recover_element_results(structure, dof, u, options.include_shear_deformation)
    reactions = compute_reactions(structure, dof, K, F, u)

    safety = analyze_safety(structure, stresses, options)
    optimization = analyze_optimization(safety)
    if not safety.is_valid:
        unsafe = sum(1 for c in safety.elements.values() if c.safety_factor <= 1.0)
        notes.append(f"{unsafe} element(s) have a safety factor at or below 1.0")

    result = AnalysisResult(
        displacements=displacements,
        forces=forces,
        stresses=stresses,
        status=STATUS_SUCCESS,
        stage=AnalysisStage.RECOVERING,
        is_valid=safety.is_valid,
        converged=solution.converged,
        iterations=solution.iterations,
        residual=solution.residual,
        max_displacement=max_displacement(displacements),
        max_stress=max_combined_stress(stresses),
        reactions=reactions,
        safety=safety,
        optimization=optimization,
    )

    logger.debug("Stage %s", AnalysisStage.COMPLIANCE_CHECKING.value)
    compliance = check_compliance(structure, result, options)
    if not compliance.compliant:
        failing = [r.code for r in compliance.results.values() if not r.compliant]
        notes.append(f"Non-compliant with {', '.join(failing)}")

    performance = PerformanceInfo(time.perf_counter() - started, dof.ndof, K.nnz)
    logger.debug("Analysis done in %.3f s (%d DOFs)", performance.solution_time, dof.ndof)

    return replace(
        result,
        status=STATUS_WARNING if notes else STATUS_SUCCESS,
        stage=AnalysisStage.DONE,
        compliance=compliance,
        performance=performance,
        warnings=notes,
    )


@dataclass(frozen=True)
class AnalysisEngine:
    """
    Options bundled with the analyze() entry point.

    Holds no state between calls; one engine may serve many threads.
    """
    options: AnalysisOptions = field(default_factory=AnalysisOptions)

    def analyze(self, structure: Structure,
                cancel_event: Optional[threading.Event] = None) -> AnalysisResult:
        return analyze(structure, self.options, cancel_event)
