# framecheck/model.py
"""
MODEL DEFINITIONS: Node, Element, Load, Structure
=================================================

PURPOSE:
--------
This module defines the data structures a frame analysis runs on:
- Node: a point in 3D space with a 6-flag support set
- Element: a two-node frame member with a material and a section
- Load: a point force or moment on one node DOF
- Structure: the container that owns all three

It also holds the fail-fast validation that runs before any matrix work, and
the builders that turn the plain JSON shape exchanged with collaborators into
model objects.

ENGINEERING CONTEXT:
--------------------
A 3D FRAME carries axial force, shear, torsion and bending in every member.
Each node therefore has 6 DOFs:

    0 ux   1 uy   2 uz   3 rx   4 ry   5 rz

and a support is a set of 6 constraint flags in that same order. The global
DOF index of (node, offset) is node_index * 6 + offset, where node_index is
the node's position in Structure.nodes.

All model objects are frozen: a Structure cannot change while analyze() runs.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Mapping, Tuple

from .catalog import Material, material_from_dict
from .section import Section, SectionError, section_from_dict, section_properties

logger = logging.getLogger(__name__)

DOF_PER_NODE = 6

# Load direction tag → local DOF offset
DIRECTIONS = {'x': 0, 'y': 1, 'z': 2, 'rx': 3, 'ry': 4, 'rz': 5}

SUPPORT_FLAGS = ('ux', 'uy', 'uz', 'rx', 'ry', 'rz')

LOAD_CASES = ('dead', 'live', 'wind', 'seismic')

# Elements shorter than this are treated as zero length
MIN_LENGTH = 1e-9


class ValidationError(ValueError):
    """Raised when a structure is malformed; always before assembly."""
    pass


@dataclass(frozen=True)
class Supports:
    """
    Constraint flags for the 6 DOFs of a node.

    True means the DOF is held at zero displacement.

    Examples:
    ---------
    >>> Supports.fixed().constrained_offsets()
    [0, 1, 2, 3, 4, 5]
    >>> Supports.pinned().constrained_offsets()
    [0, 1, 2]
    """
    ux: bool = False
    uy: bool = False
    uz: bool = False
    rx: bool = False
    ry: bool = False
    rz: bool = False

    @classmethod
    def fixed(cls) -> 'Supports':
        return cls(True, True, True, True, True, True)

    @classmethod
    def pinned(cls) -> 'Supports':
        return cls(True, True, True, False, False, False)

    @classmethod
    def roller(cls) -> 'Supports':
        return cls(uz=True)

    @classmethod
    def free(cls) -> 'Supports':
        return cls()

    @property
    def flags(self) -> Tuple[bool, ...]:
        return (self.ux, self.uy, self.uz, self.rx, self.ry, self.rz)

    @property
    def any(self) -> bool:
        return any(self.flags)

    def constrained_offsets(self) -> List[int]:
        return [i for i, flag in enumerate(self.flags) if flag]


SUPPORT_PRESETS = {
    'fixed': Supports.fixed,
    'pinned': Supports.pinned,
    'roller': Supports.roller,
    'free': Supports.free,
}


@dataclass(frozen=True)
class Node:
    """
    A node (joint) in 3D space.

    Parameters:
    -----------
    id : hashable
        Unique identifier (int or str); only its position in
        Structure.nodes decides DOF numbering
    x, y, z : float
        Global coordinates (m), z is up
    supports : Supports
        Constraint flags, free by default
    """
    id: Hashable
    x: float
    y: float
    z: float
    supports: Supports = field(default_factory=Supports)

    @property
    def coords(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class Element:
    """
    A 3D frame member (beam, column or brace) connecting two nodes.

    The element stiffness matrix is 12×12 (6 DOFs at each of 2 nodes):
        [ux_i, uy_i, uz_i, rx_i, ry_i, rz_i, ux_j, ..., rz_j]

    Parameters:
    -----------
    id : hashable
        Unique identifier
    ni, nj : hashable
        Start and end node ids
    material : Material
    section : Section
    kind : str
        'beam', 'column' or 'brace'; informational only, every kind gets
        the same full frame stiffness
    roll : float
        Rotation of the local y/z axes about the member axis (degrees)
    """
    id: Hashable
    ni: Hashable
    nj: Hashable
    material: Material
    section: Section
    kind: str = 'beam'
    roll: float = 0.0


@dataclass(frozen=True)
class Load:
    """
    A point load on one node DOF.

    direction is one of 'x', 'y', 'z' (forces, N) or 'rx', 'ry', 'rz'
    (moments, N·m). Loads on the same node and direction add up.
    case tags the load for the load-combination checks.
    """
    id: Hashable
    node: Hashable
    direction: str
    magnitude: float
    case: str = 'dead'

    @property
    def offset(self) -> int:
        return DIRECTIONS[self.direction]


@dataclass(frozen=True)
class Structure:
    """
    The complete frame model: nodes, elements and loads.

    Node order matters: node k in `nodes` owns global DOFs 6k .. 6k+5.
    """
    nodes: Tuple[Node, ...]
    elements: Tuple[Element, ...]
    loads: Tuple[Load, ...] = ()

    def __post_init__(self):
        # Accept lists from callers but store tuples so the model stays immutable
        object.__setattr__(self, 'nodes', tuple(self.nodes))
        object.__setattr__(self, 'elements', tuple(self.elements))
        object.__setattr__(self, 'loads', tuple(self.loads))

    @property
    def ndof(self) -> int:
        return DOF_PER_NODE * len(self.nodes)

    def node_index(self) -> Dict[Hashable, int]:
        """Map node id → position in `nodes` (first occurrence wins)."""
        index: Dict[Hashable, int] = {}
        for i, node in enumerate(self.nodes):
            index.setdefault(node.id, i)
        return index

    def node_map(self) -> Dict[Hashable, Node]:
        return {node.id: node for node in self.nodes}

    def constrained_dofs(self) -> List[int]:
        """Global DOF indices held by supports, in ascending order."""
        dofs = []
        for i, node in enumerate(self.nodes):
            dofs.extend(DOF_PER_NODE * i + k for k in node.supports.constrained_offsets())
        return dofs

    def element_length(self, element: Element) -> float:
        nodes = self.node_map()
        a, b = nodes[element.ni], nodes[element.nj]
        return math.dist(a.coords, b.coords)

    def height(self) -> float:
        """Vertical extent max(z) - min(z); 0 for an empty structure."""
        if not self.nodes:
            return 0.0
        zs = [n.z for n in self.nodes]
        return max(zs) - min(zs)

    def materials(self) -> List[Material]:
        """Distinct materials in element order."""
        seen: List[Material] = []
        for e in self.elements:
            if e.material not in seen:
                seen.append(e.material)
        return seen


def validate_structure(structure: Structure) -> None:
    """
    Fail fast on a malformed structure.

    Checks, in order:
    - at least one node and one element
    - node ids unique
    - element ids unique, element end nodes exist and differ
    - element length > 0 and section dimensions valid
    - load nodes exist, load directions known

    Raises:
    -------
    ValidationError
        With a message naming the offending id
    """
    if not structure.nodes:
        raise ValidationError("Structure has no nodes")
    if not structure.elements:
        raise ValidationError("Structure has no elements")

    node_ids = set()
    for node in structure.nodes:
        if node.id in node_ids:
            raise ValidationError(f"Duplicate node id {node.id!r}")
        node_ids.add(node.id)

    nodes = structure.node_map()
    element_ids = set()
    for e in structure.elements:
        if e.id in element_ids:
            raise ValidationError(f"Duplicate element id {e.id!r}")
        element_ids.add(e.id)

        for end in (e.ni, e.nj):
            if end not in node_ids:
                raise ValidationError(f"Element {e.id!r} references unknown node {end!r}")
        if e.ni == e.nj:
            raise ValidationError(f"Element {e.id!r} connects node {e.ni!r} to itself")

        length = math.dist(nodes[e.ni].coords, nodes[e.nj].coords)
        if length < MIN_LENGTH:
            raise ValidationError(f"Element {e.id!r} has zero length")

        try:
            section_properties(e.section)
        except SectionError as exc:
            raise ValidationError(f"Element {e.id!r}: {exc}") from exc

        if e.material.E <= 0.0:
            raise ValidationError(f"Element {e.id!r}: material E must be positive")

    for load in structure.loads:
        if load.node not in node_ids:
            raise ValidationError(f"Load {load.id!r} references unknown node {load.node!r}")
        if load.direction not in DIRECTIONS:
            raise ValidationError(
                f"Load {load.id!r} has unknown direction {load.direction!r} "
                f"(expected one of {', '.join(DIRECTIONS)})"
            )

    logger.debug(
        "Validated structure: %d nodes, %d elements, %d loads",
        len(structure.nodes), len(structure.elements), len(structure.loads),
    )


# ============================================================================
# BUILDERS FROM PLAIN MAPPINGS
# ============================================================================

def supports_from_value(value: Any) -> Supports:
    """
    Accept a preset name, a mapping of flags, a 6-sequence or None.

    A mapping with none of the six flags set means a free node.
    """
    if value is None:
        return Supports()
    if isinstance(value, Supports):
        return value
    if isinstance(value, str):
        try:
            return SUPPORT_PRESETS[value.lower()]()
        except KeyError:
            raise ValidationError(f"Unknown support preset {value!r}") from None
    if isinstance(value, Mapping):
        return Supports(**{flag: bool(value.get(flag, False)) for flag in SUPPORT_FLAGS})

    flags = [bool(v) for v in value]
    if len(flags) != DOF_PER_NODE:
        raise ValidationError(f"Support flags need {DOF_PER_NODE} entries, got {len(flags)}")
    return Supports(*flags)


def structure_from_dict(data: Mapping[str, Any]) -> Structure:
    """
    Build a Structure from its plain JSON form.

    Expected shape:
    ---------------
        {
          "nodes":    [{"id": 1, "x": 0, "y": 0, "z": 0, "supports": "fixed"}, ...],
          "elements": [{"id": "b1", "ni": 1, "nj": 2, "kind": "beam",
                        "material": {...} | "C25",
                        "section": {"type": "rectangular", "width": .3, "height": .5}}],
          "loads":    [{"id": "p1", "node": 2, "direction": "z",
                        "magnitude": -10000, "case": "live"}]
        }

    Missing keys and malformed entries raise ValidationError.
    """
    try:
        nodes = [
            Node(
                id=n['id'],
                x=float(n.get('x', 0.0)),
                y=float(n.get('y', 0.0)),
                z=float(n.get('z', 0.0)),
                supports=supports_from_value(n.get('supports')),
            )
            for n in data.get('nodes', [])
        ]

        elements = []
        for e in data.get('elements', []):
            material = e['material']
            if isinstance(material, str):
                material = {'name': material}
            elements.append(Element(
                id=e['id'],
                ni=e.get('ni', e.get('start')),
                nj=e.get('nj', e.get('end')),
                material=material_from_dict(material),
                section=section_from_dict(e['section']),
                kind=str(e.get('kind', e.get('type', 'beam'))),
                roll=float(e.get('roll', 0.0)),
            ))

        loads = [
            Load(
                id=ld.get('id', i),
                node=ld['node'],
                direction=str(ld['direction']),
                magnitude=float(ld['magnitude']),
                case=str(ld.get('case', 'dead')).lower(),
            )
            for i, ld in enumerate(data.get('loads', []))
        ]
    except ValidationError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"Malformed structure data: {exc}") from exc

    return Structure(nodes=nodes, elements=elements, loads=loads)
