"""
CATALOG: MATERIAL AND SECTION PROPERTIES
=========================================

PURPOSE:
--------
This module defines the Material type and a catalog of standard materials and
sections that callers can reference by name instead of repeating E, fy, fc
and section dimensions in every model.

ENGINEERING CONTEXT:
--------------------
- **Material**: Defines the substance (concrete, steel, ...)
  - E: How stiff the material is (affects deflection)
  - nu / G: Shear stiffness (torsion, Timoshenko shear deformation)
  - Strengths: Feed the allowable-stress and compliance checks
  - kind: Selects the design factor (steel 0.6, concrete 0.45) and which
    code rule set (concrete or steel) checks the material

- **Section**: Defines the cross-sectional shape and size (see section.py)

UNITS:
------
Everything is SI: Pa for E, G and strengths, kg/m³ for density, m for
dimensions. The compliance checks convert strengths to MPa when comparing
against code limits.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .section import (
    RectangularSection,
    CircularSection,
    ISection,
    HollowRectangularSection,
    HollowCircularSection,
    Section,
)


# Strength used when a material carries neither yield nor ultimate strength
FALLBACK_STRENGTH = 250e6  # Pa


@dataclass(frozen=True)
class Material:
    """
    Material properties for structural analysis.

    Parameters:
    -----------
    name : str
        Human-readable name (e.g., "Concrete C25", "Steel BJ-41")

    kind : str
        Material class tag: 'concrete', 'steel', or anything else
        (treated as a generic material with design factor 1.0)

    E : float
        Young's modulus (Pa)
        - Steel: ~200 GPa
        - Concrete: ~25-35 GPa

    nu : float
        Poisson's ratio, used to derive G when G is not given

    G : float, optional
        Shear modulus (Pa). Derived as E / (2(1 + nu)) when None.

    density : float
        Density (kg/m³)

    yield_strength : float, optional
        fy for steel (Pa)

    ultimate_strength : float, optional
        fu for steel, f'c for concrete (Pa)
    """
    name: str
    kind: str
    E: float
    nu: float = 0.3
    G: Optional[float] = None
    density: float = 0.0
    yield_strength: Optional[float] = None
    ultimate_strength: Optional[float] = None

    @property
    def shear_modulus(self) -> float:
        if self.G is not None:
            return self.G
        return self.E / (2.0 * (1.0 + self.nu))

    @property
    def strength(self) -> float:
        """Governing strength: yield, else ultimate, else the 250 MPa fallback."""
        if self.yield_strength:
            return self.yield_strength
        if self.ultimate_strength:
            return self.ultimate_strength
        return FALLBACK_STRENGTH

    @property
    def is_concrete(self) -> bool:
        return self.kind.lower() == 'concrete'

    @property
    def is_steel(self) -> bool:
        return self.kind.lower() == 'steel'

    def as_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'kind': self.kind,
            'E': self.E,
            'nu': self.nu,
            'G': self.shear_modulus,
            'density': self.density,
            'yield_strength': self.yield_strength,
            'ultimate_strength': self.ultimate_strength,
        }


def material_from_dict(data: Mapping[str, Any]) -> Material:
    """Build a Material from a plain mapping (catalog name or full record)."""
    if 'name' in data and len(data) == 1:
        return get_material(data['name'])

    return Material(
        name=str(data.get('name', 'unnamed')),
        kind=str(data.get('kind', data.get('type', 'generic'))),
        E=float(data['E']),
        nu=float(data.get('nu', 0.3)),
        G=data.get('G'),
        density=float(data.get('density', 0.0)),
        yield_strength=data.get('yield_strength'),
        ultimate_strength=data.get('ultimate_strength'),
    )


# ============================================================================
# MATERIAL DEFINITIONS
# ============================================================================

# Concrete: E from 4700·sqrt(f'c) (MPa), f'c stored as ultimate strength
CONCRETE_MATERIALS = {
    'C20': Material(name="Concrete C20", kind='concrete', E=21.0e9, nu=0.2,
                    density=2400.0, ultimate_strength=20e6),
    'C25': Material(name="Concrete C25", kind='concrete', E=23.5e9, nu=0.2,
                    density=2400.0, ultimate_strength=25e6),
    'C30': Material(name="Concrete C30", kind='concrete', E=25.7e9, nu=0.2,
                    density=2400.0, ultimate_strength=30e6),
    'C40': Material(name="Concrete C40", kind='concrete', E=29.7e9, nu=0.2,
                    density=2400.0, ultimate_strength=40e6),
}

# Structural steel grades (fy / fu)
STEEL_MATERIALS = {
    'BJ-37': Material(name="Steel BJ-37", kind='steel', E=200e9, nu=0.3,
                      density=7850.0, yield_strength=240e6, ultimate_strength=370e6),
    'BJ-41': Material(name="Steel BJ-41", kind='steel', E=200e9, nu=0.3,
                      density=7850.0, yield_strength=250e6, ultimate_strength=410e6),
    'BJ-50': Material(name="Steel BJ-50", kind='steel', E=200e9, nu=0.3,
                      density=7850.0, yield_strength=290e6, ultimate_strength=500e6),
    'A992': Material(name="Steel A992", kind='steel', E=200e9, nu=0.3,
                     density=7850.0, yield_strength=345e6, ultimate_strength=450e6),
}

DEFAULT_CONCRETE = CONCRETE_MATERIALS['C25']
DEFAULT_STEEL = STEEL_MATERIALS['BJ-41']


def get_material(name: str) -> Material:
    """Look up a catalog material by its short name ('C25', 'BJ-41', ...)."""
    if name in CONCRETE_MATERIALS:
        return CONCRETE_MATERIALS[name]
    if name in STEEL_MATERIALS:
        return STEEL_MATERIALS[name]
    raise KeyError(f"Unknown material '{name}'")


# ============================================================================
# SECTION DEFINITIONS
# ============================================================================

# Typical reinforced-concrete members (m)
CONCRETE_SECTIONS: Dict[str, Section] = {
    'B300x500': RectangularSection(width=0.3, height=0.5),
    'B250x400': RectangularSection(width=0.25, height=0.4),
    'C400x400': RectangularSection(width=0.4, height=0.4),
    'C500x500': RectangularSection(width=0.5, height=0.5),
    'P500': CircularSection(diameter=0.5),
}

# Rolled / hollow steel members (m), nominal dimensions
STEEL_SECTIONS: Dict[str, Section] = {
    'WF300x150': ISection(flange_width=0.150, flange_thickness=0.009,
                          web_height=0.282, web_thickness=0.0065),
    'WF400x200': ISection(flange_width=0.200, flange_thickness=0.013,
                          web_height=0.374, web_thickness=0.008),
    'HSS150x150x6': HollowRectangularSection(width=0.150, height=0.150, thickness=0.006),
    'CHS168x6': HollowCircularSection(diameter=0.1683, thickness=0.006),
}


def get_section(name: str) -> Section:
    """Look up a catalog section by name."""
    if name in CONCRETE_SECTIONS:
        return CONCRETE_SECTIONS[name]
    if name in STEEL_SECTIONS:
        return STEEL_SECTIONS[name]
    raise KeyError(f"Unknown section '{name}'")
