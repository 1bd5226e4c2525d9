# framecheck/kernel/boundary.py
"""
BOUNDARY CONDITIONS: Constrained DOFs on the Sparse System
==========================================================

Two ways to hold a DOF at zero displacement:

ELIMINATION (default)
    Row and column d are zeroed, K[d, d] = 1 and F[d] = 0. The system keeps
    its size and stays symmetric, and the solution has u[d] = 0 exactly.
    On the sparse matrix this is K' = M·K·M + (I − M) with M the diagonal
    0/1 mask of free DOFs.

PENALTY
    A huge spring (PENALTY_SCALE × max diagonal) is added at each constrained
    DOF and F[d] = 0. u[d] is then ~0 rather than exactly 0, and the system
    is much worse conditioned for iterative solvers.

Both functions return new objects; the inputs are not modified.
"""

from typing import Iterable, Tuple

import numpy as np
from scipy import sparse

ELIMINATION = 'elimination'
PENALTY = 'penalty'
BC_METHODS = (ELIMINATION, PENALTY)

PENALTY_SCALE = 1e12


def _constrained_mask(ndof: int, constrained_dofs: Iterable[int]) -> np.ndarray:
    mask = np.zeros(ndof, dtype=bool)
    dofs = np.fromiter(constrained_dofs, dtype=int)
    if dofs.size:
        mask[dofs] = True
    return mask


def apply_elimination(K: sparse.spmatrix, F: np.ndarray,
                      constrained_dofs: Iterable[int]) -> Tuple[sparse.csr_matrix, np.ndarray]:
    """Zero rows/columns of constrained DOFs, unit diagonal, zero load."""
    ndof = K.shape[0]
    fixed = _constrained_mask(ndof, constrained_dofs)
    free = sparse.diags((~fixed).astype(float))

    K_bc = (free @ K @ free + sparse.diags(fixed.astype(float))).tocsr()
    K_bc.eliminate_zeros()

    F_bc = np.where(fixed, 0.0, F)
    return K_bc, F_bc


def apply_penalty(K: sparse.spmatrix, F: np.ndarray,
                  constrained_dofs: Iterable[int]) -> Tuple[sparse.csr_matrix, np.ndarray]:
    """Add PENALTY_SCALE × max(diag K) on constrained DOFs, zero load there."""
    ndof = K.shape[0]
    fixed = _constrained_mask(ndof, constrained_dofs)

    diag = K.diagonal()
    scale = diag.max() if diag.size and diag.max() > 0.0 else 1.0
    penalty = PENALTY_SCALE * scale

    K_bc = (K + sparse.diags(fixed.astype(float) * penalty)).tocsr()
    F_bc = np.where(fixed, 0.0, F)
    return K_bc, F_bc


def apply_boundary_conditions(K: sparse.spmatrix, F: np.ndarray,
                              constrained_dofs: Iterable[int],
                              method: str = ELIMINATION) -> Tuple[sparse.csr_matrix, np.ndarray]:
    """
    Apply support constraints with the chosen method.

    Raises:
    -------
    ValueError
        If method is not 'elimination' or 'penalty'
    """
    if method == ELIMINATION:
        return apply_elimination(K, F, constrained_dofs)
    if method == PENALTY:
        return apply_penalty(K, F, constrained_dofs)
    raise ValueError(f"Unknown boundary condition method {method!r}; expected one of {BC_METHODS}")
