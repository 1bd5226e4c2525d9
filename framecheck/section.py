# framecheck/section.py
"""
SECTION LIBRARY: Cross-Section Properties from Shape Descriptors
================================================================

PURPOSE:
--------
A frame element needs more than "A and I". For 3D analysis each member
carries axial force, two shears, torsion and two bending moments, so the
stiffness builder and the stress recovery need:

    area      A         axial stiffness EA/L, axial stress N/A
    Iy, Iz              bending stiffness in the two planes
    J                   torsional stiffness GJ/L
    Ay, Az              shear areas (Timoshenko correction, shear stress)
    Sy, Sz              section moduli (bending stress M/S)
    ry, rz              radii of gyration (slenderness)

Each shape is its own frozen dataclass with its own derivation rule, so
adding a shape means adding a class, not another branch in a string switch.

SUPPORTED SHAPES:
-----------------
    RectangularSection        b × h, Saint-Venant torsion approximation
    CircularSection           solid round bar
    ISection                  doubly symmetric I / H shape
    HollowRectangularSection  box, thin-wall torsion
    HollowCircularSection     tube
    GenericSection            caller-supplied properties (catalog entries,
                              unknown shape tags from external data)

Units are whatever the caller uses consistently; the engine uses SI (m).
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


class SectionError(ValueError):
    """Raised when a section has non-positive or inconsistent dimensions."""
    pass


# Shear correction factors
K_RECTANGULAR = 5.0 / 6.0
K_CIRCULAR = 9.0 / 10.0
K_GENERIC = 0.8

# Default wall thickness of hollow shapes, as a fraction of the governing dimension
DEFAULT_WALL_FRACTION = 0.1


@dataclass(frozen=True)
class SectionProperties:
    """
    Derived cross-section properties.

    Attributes:
    -----------
    area : float
        Cross-sectional area A
    Iy, Iz : float
        Second moments of area about the local y and z axes
    J : float
        Torsional constant
    Ay, Az : float
        Effective shear areas
    Sy, Sz : float
        Elastic section moduli (Sy = Iy / (h/2), Sz = Iz / (b/2))
    ry, rz : float
        Radii of gyration sqrt(I / A)
    """
    area: float
    Iy: float
    Iz: float
    J: float
    Ay: float
    Az: float
    Sy: float
    Sz: float
    ry: float
    rz: float

    def as_dict(self) -> Dict[str, float]:
        return {
            'area': self.area,
            'Iy': self.Iy,
            'Iz': self.Iz,
            'J': self.J,
            'Ay': self.Ay,
            'Az': self.Az,
            'Sy': self.Sy,
            'Sz': self.Sz,
            'ry': self.ry,
            'rz': self.rz,
        }


def _require_positive(**dims: Optional[float]) -> None:
    for name, value in dims.items():
        if value is None or not value > 0.0:
            raise SectionError(f"Section dimension '{name}' must be positive, got {value}")


def _finish(area: float, Iy: float, Iz: float, J: float, Ay: float, Az: float,
            depth: float, width: float) -> SectionProperties:
    """Fill in the properties every shape derives the same way."""
    return SectionProperties(
        area=area,
        Iy=Iy,
        Iz=Iz,
        J=J,
        Ay=Ay,
        Az=Az,
        Sy=Iy / (depth / 2.0),
        Sz=Iz / (width / 2.0),
        ry=math.sqrt(Iy / area),
        rz=math.sqrt(Iz / area),
    )


def rectangular_torsion_constant(b: float, h: float) -> float:
    """
    Saint-Venant torsional constant of a solid rectangle.

    J = β × a × c³ with a = long side, c = short side and β read from a
    piecewise-linear fit of the classical Saint-Venant table:

        c/a ≥ 1.00   β = 0.141
        c/a ≥ 0.75   β = 0.196·(c/a) − 0.056
        c/a ≥ 0.50   β = 0.267·(c/a) − 0.109
        otherwise    β = 0.333·(c/a) − 0.142

    The last band turns non-positive below c/a ≈ 0.426; there the
    thin-rectangle value β = (1 − 0.63·c/a) / 3 is used so that GJ stays
    positive.
    """
    a = max(b, h)
    c = min(b, h)
    ratio = c / a

    if ratio >= 1.0:
        beta = 0.141
    elif ratio >= 0.75:
        beta = 0.196 * ratio - 0.056
    elif ratio >= 0.5:
        beta = 0.267 * ratio - 0.109
    else:
        beta = 0.333 * ratio - 0.142
        if beta <= 0.0:
            beta = (1.0 - 0.63 * ratio) / 3.0

    return beta * a * c ** 3


class Section:
    """Base class of all section shapes."""

    shape = 'generic'

    def properties(self) -> SectionProperties:
        raise NotImplementedError

    def as_dict(self) -> Dict[str, Any]:
        data = {'type': self.shape}
        data.update({k: v for k, v in vars(self).items() if v is not None})
        return data


@dataclass(frozen=True)
class RectangularSection(Section):
    """Solid rectangle of width b and height h."""
    width: float
    height: float

    shape = 'rectangular'

    def properties(self) -> SectionProperties:
        b, h = self.width, self.height
        _require_positive(width=b, height=h)

        area = b * h
        Iy = b * h ** 3 / 12.0
        Iz = h * b ** 3 / 12.0
        J = rectangular_torsion_constant(b, h)

        return _finish(area, Iy, Iz, J, K_RECTANGULAR * area, K_RECTANGULAR * area,
                       depth=h, width=b)


@dataclass(frozen=True)
class CircularSection(Section):
    """Solid round bar."""
    diameter: float

    shape = 'circular'

    def properties(self) -> SectionProperties:
        _require_positive(diameter=self.diameter)
        r = self.diameter / 2.0

        area = math.pi * r ** 2
        I = math.pi * r ** 4 / 4.0
        As = K_CIRCULAR * area

        # Round bar takes J = I
        return _finish(area, I, I, I, As, As, depth=self.diameter, width=self.diameter)


@dataclass(frozen=True)
class ISection(Section):
    """
    Doubly symmetric I-section.

    Parameters:
    -----------
    flange_width : float      bf
    flange_thickness : float  tf
    web_height : float        hw (clear web between flanges)
    web_thickness : float     tw

    Total depth h = hw + 2·tf. The web carries strong-axis shear (Ay = hw·tw),
    the flanges weak-axis shear (Az = 2·bf·tf).
    """
    flange_width: float
    flange_thickness: float
    web_height: float
    web_thickness: float

    shape = 'i-section'

    @property
    def depth(self) -> float:
        return self.web_height + 2.0 * self.flange_thickness

    def properties(self) -> SectionProperties:
        bf, tf = self.flange_width, self.flange_thickness
        hw, tw = self.web_height, self.web_thickness
        _require_positive(flange_width=bf, flange_thickness=tf,
                          web_height=hw, web_thickness=tw)
        if tw > bf:
            raise SectionError(f"Web thickness {tw} exceeds flange width {bf}")

        h = self.depth
        area = 2.0 * bf * tf + hw * tw
        Iy = bf * h ** 3 / 12.0 - (bf - tw) * hw ** 3 / 12.0
        Iz = (2.0 * tf * bf ** 3 + hw * tw ** 3) / 12.0
        J = (2.0 * bf * tf ** 3 + hw * tw ** 3) / 3.0

        return _finish(area, Iy, Iz, J, hw * tw, 2.0 * bf * tf, depth=h, width=bf)


@dataclass(frozen=True)
class HollowRectangularSection(Section):
    """Rectangular box, wall thickness defaults to 10% of the smaller side."""
    width: float
    height: float
    thickness: Optional[float] = None

    shape = 'hollow-rectangular'

    @property
    def wall(self) -> float:
        if self.thickness is not None:
            return self.thickness
        return DEFAULT_WALL_FRACTION * min(self.width, self.height)

    def properties(self) -> SectionProperties:
        b, h = self.width, self.height
        t = self.wall
        _require_positive(width=b, height=h, thickness=t)

        bi = b - 2.0 * t
        hi = h - 2.0 * t
        if bi <= 0.0 or hi <= 0.0:
            raise SectionError(f"Wall thickness {t} closes a {b} x {h} box")

        area = b * h - bi * hi
        Iy = (b * h ** 3 - bi * hi ** 3) / 12.0
        Iz = (h * b ** 3 - hi * bi ** 3) / 12.0

        # Bredt: J = 4·Am²·t / perimeter of the wall centreline
        J = 2.0 * t * ((b - t) * (h - t)) ** 2 / (b + h - 2.0 * t)

        return _finish(area, Iy, Iz, J, 2.0 * t * h, 2.0 * t * b, depth=h, width=b)


@dataclass(frozen=True)
class HollowCircularSection(Section):
    """Circular tube, wall thickness defaults to 10% of the outer diameter."""
    diameter: float
    thickness: Optional[float] = None

    shape = 'hollow-circular'

    @property
    def wall(self) -> float:
        if self.thickness is not None:
            return self.thickness
        return DEFAULT_WALL_FRACTION * self.diameter

    def properties(self) -> SectionProperties:
        D = self.diameter
        t = self.wall
        _require_positive(diameter=D, thickness=t)

        Di = D - 2.0 * t
        if Di <= 0.0:
            raise SectionError(f"Wall thickness {t} closes a tube of diameter {D}")

        area = math.pi * (D ** 2 - Di ** 2) / 4.0
        I = math.pi * (D ** 4 - Di ** 4) / 64.0
        J = math.pi * (D ** 4 - Di ** 4) / 32.0
        As = K_CIRCULAR * area

        return _finish(area, I, I, J, As, As, depth=D, width=D)


@dataclass(frozen=True)
class GenericSection(Section):
    """
    Fallback for shapes the library does not know.

    Explicit property overrides win; anything missing is approximated from a
    width × height rectangle, with J ≈ 0.1·Iy when no torsional constant is
    given. Width and height may be left at 0 when area, Iy, Iz, J, Sy and Sz
    are all supplied.
    """
    width: float = 0.0
    height: float = 0.0
    area: Optional[float] = None
    Iy: Optional[float] = None
    Iz: Optional[float] = None
    J: Optional[float] = None
    Sy: Optional[float] = None
    Sz: Optional[float] = None
    tag: Optional[str] = None

    shape = 'generic'

    def properties(self) -> SectionProperties:
        b, h = self.width, self.height
        overrides = (self.area, self.Iy, self.Iz, self.Sy, self.Sz)
        if any(v is None for v in overrides):
            _require_positive(width=b, height=h)

        area = self.area if self.area is not None else b * h
        Iy = self.Iy if self.Iy is not None else b * h ** 3 / 12.0
        Iz = self.Iz if self.Iz is not None else h * b ** 3 / 12.0
        J = self.J if self.J is not None else 0.1 * Iy
        Sy = self.Sy if self.Sy is not None else Iy / (h / 2.0)
        Sz = self.Sz if self.Sz is not None else Iz / (b / 2.0)
        _require_positive(area=area, Iy=Iy, Iz=Iz, J=J, Sy=Sy, Sz=Sz)

        As = K_GENERIC * area
        return SectionProperties(
            area=area,
            Iy=Iy,
            Iz=Iz,
            J=J,
            Ay=As,
            Az=As,
            Sy=Sy,
            Sz=Sz,
            ry=math.sqrt(Iy / area),
            rz=math.sqrt(Iz / area),
        )


def section_properties(section: Section) -> SectionProperties:
    """Derive the full property set of a section (pure function)."""
    return section.properties()


# Shape tags used by external collaborators
SECTION_TYPES = {
    'rectangular': RectangularSection,
    'circular': CircularSection,
    'i-section': ISection,
    'hollow-rectangular': HollowRectangularSection,
    'hollow-circular': HollowCircularSection,
}


def section_from_dict(data: Mapping[str, Any]) -> Section:
    """
    Build a section from its plain-mapping form.

    Recognized tags map to their shape class; any other tag produces a
    GenericSection that keeps the tag and the supplied property overrides.

    Example:
    --------
    >>> section_from_dict({'type': 'rectangular', 'width': 0.3, 'height': 0.5})
    RectangularSection(width=0.3, height=0.5)
    """
    fields = dict(data)
    tag = str(fields.pop('type', 'generic')).lower()

    cls = SECTION_TYPES.get(tag)
    if cls is None:
        return GenericSection(
            width=fields.get('width', 0.0),
            height=fields.get('height', 0.0),
            area=fields.get('area'),
            Iy=fields.get('Iy'),
            Iz=fields.get('Iz'),
            J=fields.get('J'),
            Sy=fields.get('Sy'),
            Sz=fields.get('Sz'),
            tag=tag,
        )

    try:
        return cls(**fields)
    except TypeError as e:
        raise SectionError(f"Invalid dimensions for '{tag}' section: {e}") from e
