# framecheck - 3D Frame Analysis and Code Compliance
"""
FRAMECHECK: Linear Static 3D Frame Analysis with Code Compliance Checks
=======================================================================

This package provides:
- Cross-section properties for common structural shapes
- 3D frame (beam/column/brace) stiffness with optional Timoshenko shear
- Sparse assembly and a Conjugate Gradient solver
- Internal force, stress and reaction recovery
- Safety factors, utilization and optimization suggestions
- Rule-based compliance checks (SNI 1726/1727/2847/1729, ACI 318, AISC 360)

ARCHITECTURE:
-------------
    section.py      Section shapes → SectionProperties
    catalog.py      Material type, standard materials and sections
    model.py        Node, Element, Load, Structure, validation
    elements.py     12×12 frame element stiffness and rotation
    kernel/         DOF indexing, sparse assembly, supports, CG solve
    post.py         Displacements, end forces, stresses, reactions
    safety.py       Utilization, safety factors, suggestions
    checks/         Compliance rule sets
    config.py       AnalysisOptions
    analysis.py     analyze(): the staged pipeline
"""

from .analysis import AnalysisEngine, AnalysisResult, AnalysisStage, analyze
from .catalog import Material
from .config import AnalysisOptions
from .kernel.solve import ConvergenceWarning, NumericalError, SolverCancelled
from .model import Element, Load, Node, Structure, Supports, ValidationError, structure_from_dict
from .section import (
    CircularSection,
    GenericSection,
    HollowCircularSection,
    HollowRectangularSection,
    ISection,
    RectangularSection,
    SectionError,
    section_properties,
)

__version__ = "0.1.0"

__all__ = [
    'analyze', 'AnalysisEngine', 'AnalysisResult', 'AnalysisStage', 'AnalysisOptions',
    'Node', 'Element', 'Load', 'Structure', 'Supports', 'Material', 'structure_from_dict',
    'RectangularSection', 'CircularSection', 'ISection', 'HollowRectangularSection',
    'HollowCircularSection', 'GenericSection', 'section_properties',
    'ValidationError', 'SectionError', 'ConvergenceWarning', 'NumericalError', 'SolverCancelled',
]
