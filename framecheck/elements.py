# framecheck/elements.py
"""
3D FRAME ELEMENT: 12×12 Stiffness Matrix with Optional Shear Deformation
========================================================================

PURPOSE:
--------
This module computes the global stiffness matrix of a two-node 3D frame
element. It is the core engineering calculation of the engine: everything
the assembler does is scatter these matrices into K.

ENGINEERING DERIVATION:
-----------------------
In LOCAL coordinates (x' along the member, y' and z' the section axes) the
12 DOFs are

    [ux_i, uy_i, uz_i, rx_i, ry_i, rz_i, ux_j, uy_j, uz_j, rx_j, ry_j, rz_j]

and the member decouples into four independent actions:

    axial      EA/L on (0, 6)
    torsion    GJ/L on (3, 9)
    bending    uz/ry plane on (2, 4, 8, 10), inertia Iz, shear area Ay
    bending    uy/rz plane on (1, 5, 7, 11), inertia Iy, shear area Az

Each bending plane uses the Timoshenko coefficients

    φ  = 12·E·I / (G·As·L²)        (φ = 0 when shear deformation is off)
    c1 = 12·E·I / (L³·(1+φ))
    c2 =  6·E·I / (L²·(1+φ))
    c3 = (4+φ)·E·I / (L·(1+φ))
    c4 = (2−φ)·E·I / (L·(1+φ))

and the global matrix is

    K_global = Tᵀ · K_local · T

where T is block-diagonal with four copies of the 3×3 rotation λ.

LOCAL AXES:
-----------
Local x runs from node i to node j. Local y is horizontal and perpendicular
to x (y ∥ Z × x), local z = x × y. A vertical member has no horizontal
normal, so it takes global Y as local y. An element's `roll` angle then
rotates y and z about x.
"""

import math
from typing import Mapping, Hashable, Tuple

import numpy as np

from .model import Element, Node, MIN_LENGTH
from .section import section_properties


# A member is vertical when its horizontal projection is below this fraction of L
VERTICAL_TOLERANCE = 1e-6


def element_geometry(nodes: Mapping[Hashable, Node], element: Element) -> Tuple[float, float, float, float]:
    """
    Length and direction cosines of a frame element.

    Returns:
    --------
    Tuple[float, float, float, float]
        (L, cx, cy, cz). A zero-length element returns (0.0, 0.0, 0.0, 0.0);
        validation rejects those before assembly.
    """
    ni = nodes[element.ni]
    nj = nodes[element.nj]

    dx = nj.x - ni.x
    dy = nj.y - ni.y
    dz = nj.z - ni.z
    L = math.sqrt(dx * dx + dy * dy + dz * dz)

    if L < MIN_LENGTH:
        return 0.0, 0.0, 0.0, 0.0

    return L, dx / L, dy / L, dz / L


def rotation_matrix(cx: float, cy: float, cz: float, roll: float = 0.0) -> np.ndarray:
    """
    3×3 rotation λ whose rows are the local x, y, z axes in global terms.

    Parameters:
    -----------
    cx, cy, cz : float
        Direction cosines of the member axis
    roll : float
        Rotation of the section axes about the member axis (degrees)

    A member along global X keeps the global axes (λ = I); a vertical member
    gets local y = global Y.
    """
    x_axis = np.array([cx, cy, cz], dtype=float)
    horizontal = math.hypot(cx, cy)

    if horizontal > VERTICAL_TOLERANCE:
        y_axis = np.array([-cy, cx, 0.0]) / horizontal
        z_axis = np.array([-cx * cz, -cy * cz, cx * cx + cy * cy]) / horizontal
    else:
        y_axis = np.array([0.0, 1.0, 0.0])
        z_axis = np.cross(x_axis, y_axis)
        z_axis /= np.linalg.norm(z_axis)

    if roll:
        theta = math.radians(roll)
        c, s = math.cos(theta), math.sin(theta)
        y_axis, z_axis = c * y_axis + s * z_axis, -s * y_axis + c * z_axis

    return np.vstack([x_axis, y_axis, z_axis])


def transformation_matrix(lam: np.ndarray) -> np.ndarray:
    """12×12 block-diagonal T = diag(λ, λ, λ, λ)."""
    return np.kron(np.eye(4), lam)


def _bending_coefficients(E: float, G: float, I: float, As: float, L: float,
                          include_shear: bool) -> Tuple[float, float, float, float]:
    phi = 12.0 * E * I / (G * As * L * L) if include_shear else 0.0
    d = 1.0 + phi
    c1 = 12.0 * E * I / (L ** 3 * d)
    c2 = 6.0 * E * I / (L ** 2 * d)
    c3 = (4.0 + phi) * E * I / (L * d)
    c4 = (2.0 - phi) * E * I / (L * d)
    return c1, c2, c3, c4


def frame3d_local_stiffness(element: Element, L: float, include_shear: bool = True) -> np.ndarray:
    """
    12×12 local stiffness matrix of a 3D frame element.

    Parameters:
    -----------
    element : Element
        Supplies material (E, G) and section (A, Iy, Iz, J, Ay, Az)
    L : float
        Member length (m)
    include_shear : bool
        Apply the Timoshenko shear correction φ

    Returns:
    --------
    np.ndarray
        Symmetric 12×12 matrix in local coordinates
    """
    props = section_properties(element.section)
    E = element.material.E
    G = element.material.shear_modulus

    k = np.zeros((12, 12))

    # Axial
    ea = E * props.area / L
    k[0, 0] = k[6, 6] = ea
    k[0, 6] = -ea

    # Torsion
    gj = G * props.J / L
    k[3, 3] = k[9, 9] = gj
    k[3, 9] = -gj

    # Bending in the uz/ry plane
    c1, c2, c3, c4 = _bending_coefficients(E, G, props.Iz, props.Ay, L, include_shear)
    k[2, 2] = k[8, 8] = c1
    k[4, 4] = k[10, 10] = c3
    k[2, 4] = -c2
    k[2, 8] = -c1
    k[2, 10] = -c2
    k[4, 8] = c2
    k[4, 10] = c4
    k[8, 10] = c2

    # Bending in the uy/rz plane
    c1, c2, c3, c4 = _bending_coefficients(E, G, props.Iy, props.Az, L, include_shear)
    k[1, 1] = k[7, 7] = c1
    k[5, 5] = k[11, 11] = c3
    k[1, 5] = c2
    k[1, 7] = -c1
    k[1, 11] = c2
    k[5, 7] = -c2
    k[5, 11] = c4
    k[7, 11] = -c2

    # Mirror the upper triangle
    return k + np.triu(k, 1).T


def element_stiffness_global(element: Element, nodes: Mapping[Hashable, Node],
                             include_shear: bool = True) -> np.ndarray:
    """
    12×12 global stiffness matrix K = Tᵀ · K_local · T.

    A zero-length element yields a zero matrix.

    Example:
    --------
    >>> k = element_stiffness_global(beam, {0: n0, 1: n1}, include_shear=False)
    >>> np.allclose(k, k.T)
    True
    """
    L, cx, cy, cz = element_geometry(nodes, element)
    if L == 0.0:
        return np.zeros((12, 12))

    k_local = frame3d_local_stiffness(element, L, include_shear)
    T = transformation_matrix(rotation_matrix(cx, cy, cz, element.roll))
    return T.T @ k_local @ T
