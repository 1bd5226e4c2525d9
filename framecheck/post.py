# framecheck/post.py
# displacements, element end forces, stresses, reactions

import logging
from dataclasses import dataclass
from typing import Dict, Hashable, Mapping, Tuple

import numpy as np
from scipy import sparse

from .elements import element_geometry, frame3d_local_stiffness, rotation_matrix, transformation_matrix
from .kernel.dof import DOFManager
from .model import Element, Node, Structure
from .section import SectionProperties, section_properties

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeDisplacement:
    """Translations (m) and rotations (rad) of one node."""
    ux: float
    uy: float
    uz: float
    rx: float
    ry: float
    rz: float

    @property
    def translation(self) -> Tuple[float, float, float]:
        return (self.ux, self.uy, self.uz)

    def as_dict(self) -> Dict[str, float]:
        return {'ux': self.ux, 'uy': self.uy, 'uz': self.uz,
                'rx': self.rx, 'ry': self.ry, 'rz': self.rz}


@dataclass(frozen=True)
class ElementForces:
    """
    Internal actions at the node-I end of an element, local axes.

    N is positive in tension. Vy, Vz, T, My, Mz are the node-I end actions
    of f = k_local · u_local.
    """
    N: float
    Vy: float
    Vz: float
    T: float
    My: float
    Mz: float

    def as_dict(self) -> Dict[str, float]:
        return {'N': self.N, 'Vy': self.Vy, 'Vz': self.Vz,
                'T': self.T, 'My': self.My, 'Mz': self.Mz}


@dataclass(frozen=True)
class ElementStresses:
    """
    Stresses (Pa) derived from ElementForces.

    axial    = N / A (signed)
    shear    = √(Vy² + Vz²) / Ay
    bending  = max(|My| / Sy, |Mz| / Sz)
    combined = |axial| + bending
    """
    axial: float
    shear: float
    bending: float
    combined: float

    def as_dict(self) -> Dict[str, float]:
        return {'axial': self.axial, 'shear': self.shear,
                'bending': self.bending, 'combined': self.combined}


ZERO_FORCES = ElementForces(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
ZERO_STRESSES = ElementStresses(0.0, 0.0, 0.0, 0.0)


def compute_nodal_displacements(
    structure: Structure,
    dof: DOFManager,
    u: np.ndarray,
) -> Dict[Hashable, NodeDisplacement]:
    """Slice the global displacement vector into per-node records."""
    return {
        node.id: NodeDisplacement(*(float(v) for v in u[dof.node_dofs(node.id)]))
        for node in structure.nodes
    }


def element_end_forces_local(
    nodes: Mapping[Hashable, Node],
    element: Element,
    dof: DOFManager,
    u: np.ndarray,
    include_shear: bool = True,
) -> np.ndarray:
    """
    12 end forces of an element in LOCAL coordinates.

    The process:
    1. Gather the element's 12 global displacements
    2. Rotate them to local axes: u_local = T · u_e
    3. f_local = k_local · u_local  (equivalently T · K_global · u_e)

    Returns zeros for a zero-length element.
    """
    L, cx, cy, cz = element_geometry(nodes, element)
    if L == 0.0:
        return np.zeros(12)

    u_e = u[dof.element_dof_map([element.ni, element.nj])]
    T = transformation_matrix(rotation_matrix(cx, cy, cz, element.roll))
    k_local = frame3d_local_stiffness(element, L, include_shear)
    return k_local @ (T @ u_e)


def forces_from_end_vector(f_local: np.ndarray) -> ElementForces:
    """Node-I internal actions; axial sign flipped so tension is positive."""
    return ElementForces(
        N=float(-f_local[0]),
        Vy=float(f_local[1]),
        Vz=float(f_local[2]),
        T=float(f_local[3]),
        My=float(f_local[4]),
        Mz=float(f_local[5]),
    )


def compute_stresses(forces: ElementForces, props: SectionProperties) -> ElementStresses:
    """Axial, shear, bending and combined stress for one element."""
    axial = forces.N / props.area
    shear = float(np.hypot(forces.Vy, forces.Vz)) / props.Ay
    bending = max(abs(forces.My) / props.Sy, abs(forces.Mz) / props.Sz)
    return ElementStresses(
        axial=axial,
        shear=shear,
        bending=bending,
        combined=abs(axial) + bending,
    )


def recover_element_results(
    structure: Structure,
    dof: DOFManager,
    u: np.ndarray,
    include_shear: bool = True,
) -> Tuple[Dict[Hashable, ElementForces], Dict[Hashable, ElementStresses]]:
    """Forces and stresses for every element, keyed by element id."""
    forces: Dict[Hashable, ElementForces] = {}
    stresses: Dict[Hashable, ElementStresses] = {}
    nodes = structure.node_map()

    for element in structure.elements:
        f_local = element_end_forces_local(nodes, element, dof, u, include_shear)
        ef = forces_from_end_vector(f_local)
        forces[element.id] = ef
        stresses[element.id] = compute_stresses(ef, section_properties(element.section))

    return forces, stresses


def compute_reactions(
    structure: Structure,
    dof: DOFManager,
    K: sparse.spmatrix,
    F: np.ndarray,
    u: np.ndarray,
) -> Dict[Hashable, Tuple[float, ...]]:
    """
    Support reactions R = K·u − F at constrained DOFs.

    K and F must be the assembled system BEFORE boundary conditions.
    Components of a supported node that are not constrained report 0.

    Returns:
    --------
    Dict[node id, (Rx, Ry, Rz, Mx, My, Mz)] for every supported node
    """
    R = K @ u - F
    reactions = {}
    for node in structure.nodes:
        if not node.supports.any:
            continue
        dofs = dof.node_dofs(node.id)
        reactions[node.id] = tuple(
            float(R[d]) if flag else 0.0
            for d, flag in zip(dofs, node.supports.flags)
        )
    return reactions


def max_displacement(displacements: Dict[Hashable, NodeDisplacement]) -> float:
    """Largest absolute translational displacement component."""
    return max(
        (abs(c) for d in displacements.values() for c in d.translation),
        default=0.0,
    )


def max_combined_stress(stresses: Dict[Hashable, ElementStresses]) -> float:
    return max((s.combined for s in stresses.values()), default=0.0)
