# framecheck/config.py
"""
Analysis options and defaults.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Tuple

from .kernel.boundary import BC_METHODS, ELIMINATION
from .kernel.solve import DEFAULT_MAX_ITERATIONS

ANALYSIS_TYPES = ('linear',)

# Absolute residual target for analyze(), in load units (N)
DEFAULT_ANALYSIS_TOLERANCE = 1e-6

# Compliance rule sets, by key
DEFAULT_RULE_SETS = ('seismic', 'loads', 'concrete', 'steel')
AVAILABLE_RULE_SETS = DEFAULT_RULE_SETS + ('aci318', 'aisc360')


def _default_load_factors() -> Dict[str, float]:
    return {'dead': 1.2, 'live': 1.6, 'wind': 1.6, 'seismic': 1.0}


def _default_design_factors() -> Dict[str, float]:
    return {'steel': 0.6, 'concrete': 0.45}


def _default_deflection_limits() -> Dict[str, float]:
    # span / limit
    return {'concrete': 250.0, 'steel': 300.0}


@dataclass(frozen=True)
class AnalysisOptions:
    """Options for one analyze() call. Immutable; build a new one to change."""

    # Analysis
    analysis_type: str = 'linear'
    include_shear_deformation: bool = True
    bc_method: str = ELIMINATION

    # Solver
    tolerance: float = DEFAULT_ANALYSIS_TOLERANCE
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    relative_tolerance: bool = False   # test ‖r‖ / ‖F‖ instead of ‖r‖

    # Load and design factors
    load_factors: Dict[str, float] = field(default_factory=_default_load_factors)
    design_factors: Dict[str, float] = field(default_factory=_default_design_factors)
    default_design_factor: float = 1.0

    # Serviceability
    deflection_limits: Dict[str, float] = field(default_factory=_default_deflection_limits)

    # Seismic limits
    max_height: float = 60.0
    max_irregularity: float = 0.3
    max_drift_ratio: float = 0.02

    # Compliance
    rule_sets: Tuple[str, ...] = DEFAULT_RULE_SETS

    def __post_init__(self):
        if self.analysis_type not in ANALYSIS_TYPES:
            raise ValueError(
                f"Unsupported analysis type {self.analysis_type!r}; only linear static analysis is available"
            )
        if self.bc_method not in BC_METHODS:
            raise ValueError(f"Unknown boundary condition method {self.bc_method!r}")
        if not self.tolerance > 0.0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")

        negative = {k: v for k, v in self.load_factors.items() if v < 0.0}
        if negative:
            raise ValueError(f"Load factors must not be negative, got {negative}")
        if not self.average_load_factor > 0.0:
            raise ValueError(
                f"Dead and live load factors must average above zero, got {self.average_load_factor}"
            )
        for name, mapping in (('design factor', self.design_factors),
                              ('deflection limit', self.deflection_limits)):
            bad = {k: v for k, v in mapping.items() if not v > 0.0}
            if bad:
                raise ValueError(f"Each {name} must be positive, got {bad}")
        if not self.default_design_factor > 0.0:
            raise ValueError(f"default_design_factor must be positive, got {self.default_design_factor}")

        unknown = [r for r in self.rule_sets if r not in AVAILABLE_RULE_SETS]
        if unknown:
            raise ValueError(f"Unknown rule sets {unknown}; available: {AVAILABLE_RULE_SETS}")
        object.__setattr__(self, 'rule_sets', tuple(self.rule_sets))

    @property
    def average_load_factor(self) -> float:
        """Mean of the dead and live factors (1.4 with defaults)."""
        return (self.load_factors.get('dead', 1.2) + self.load_factors.get('live', 1.6)) / 2.0

    def design_factor(self, kind: str) -> float:
        return self.design_factors.get(kind.lower(), self.default_design_factor)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'AnalysisOptions':
        """
        Build options from a plain mapping. Unknown keys are ignored; factor
        mappings are merged over the defaults.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known and v is not None}

        for name, default in (('load_factors', _default_load_factors),
                              ('design_factors', _default_design_factors),
                              ('deflection_limits', _default_deflection_limits)):
            if name in kwargs:
                merged = default()
                merged.update({k: float(v) for k, v in kwargs[name].items()})
                kwargs[name] = merged

        if 'rule_sets' in kwargs:
            kwargs['rule_sets'] = tuple(kwargs['rule_sets'])
        return cls(**kwargs)

    def as_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
