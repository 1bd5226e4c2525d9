# framecheck/kernel/assemble.py
"""
ASSEMBLY: Sparse Global Stiffness Matrix and Load Vector
========================================================

PURPOSE:
--------
This module scatters element contributions into the global stiffness matrix
K and builds the global load vector F.

K is stored sparse. Each element adds a 12×12 block; the triplets
(row, col, value) are collected as COO data and converted to CSR, which
sums duplicate entries. That conversion IS the scatter-add:

    for each element:
        for each (a, b) in ke:
            K[dof_map[a], dof_map[b]] += ke[a, b]

Entries with |value| ≤ 1e-12 are dropped so exact cancellations and
round-off noise do not occupy storage.

USAGE:
------
    dof = DOFManager.for_structure(structure)
    contributions = element_contributions(structure, dof, include_shear=True)
    K = assemble_global_K(dof.ndof, contributions)
    F = assemble_global_F(structure, dof)

    # or, in one step
    K, F = assemble(structure, include_shear=True)
"""

import logging
from typing import List, Tuple

import numpy as np
from scipy import sparse

from ..elements import element_stiffness_global
from ..model import Structure
from .dof import DOFManager

logger = logging.getLogger(__name__)

# Stored entries at or below this magnitude are dropped
DROP_TOLERANCE = 1e-12


def element_contributions(
    structure: Structure,
    dof: DOFManager,
    include_shear: bool = True,
) -> List[Tuple[List[int], np.ndarray]]:
    """(dof_map, ke_global) for every element of the structure."""
    nodes = structure.node_map()
    contributions = []
    for element in structure.elements:
        dof_map = dof.element_dof_map([element.ni, element.nj])
        ke = element_stiffness_global(element, nodes, include_shear)
        contributions.append((dof_map, ke))
    return contributions


def assemble_global_K(
    ndof: int,
    contributions: List[Tuple[List[int], np.ndarray]],
) -> sparse.csr_matrix:
    """
    Assemble the sparse global stiffness matrix from element contributions.

    Parameters:
    -----------
    ndof : int
        Total number of DOFs in the system (6 × n_nodes)
    contributions : List[Tuple[List[int], np.ndarray]]
        (dof_map, ke) per element, ke of shape (len(dof_map), len(dof_map))

    Returns:
    --------
    scipy.sparse.csr_matrix
        Symmetric global K, shape (ndof, ndof); singular until supports
        are applied
    """
    rows, cols, vals = [], [], []

    for dof_map, ke in contributions:
        n = len(dof_map)
        assert ke.shape == (n, n), \
            f"Element ke shape {ke.shape} doesn't match dof_map length {n}"

        idx = np.asarray(dof_map, dtype=int)
        rows.append(np.repeat(idx, n))
        cols.append(np.tile(idx, n))
        vals.append(ke.ravel())

    if not rows:
        return sparse.csr_matrix((ndof, ndof))

    K = sparse.coo_matrix(
        (np.concatenate(vals), (np.concatenate(rows), np.concatenate(cols))),
        shape=(ndof, ndof),
    ).tocsr()

    # Drop cancelled and round-off entries
    K.data[np.abs(K.data) <= DROP_TOLERANCE] = 0.0
    K.eliminate_zeros()
    return K


def assemble_global_F(structure: Structure, dof: DOFManager) -> np.ndarray:
    """
    Global load vector from the structure's point loads.

    Each load adds its magnitude at node_index*6 + direction offset; loads on
    the same node and direction accumulate.
    """
    F = np.zeros(dof.ndof, dtype=float)
    for load in structure.loads:
        F[dof.idx(load.node, load.offset)] += load.magnitude
    return F


def assemble(structure: Structure, include_shear: bool = True) -> Tuple[sparse.csr_matrix, np.ndarray]:
    """Build (K, F) for a validated structure."""
    dof = DOFManager.for_structure(structure)
    K = assemble_global_K(dof.ndof, element_contributions(structure, dof, include_shear))
    F = assemble_global_F(structure, dof)

    logger.debug("Assembled K: %d DOFs, %d stored entries", dof.ndof, K.nnz)
    return K, F
