# framecheck/kernel/solve.py
"""Sparse Conjugate Gradient solver for the constrained stiffness system."""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy import sparse

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 1000
DEFAULT_TOLERANCE = 1e-10

# Rayleigh quotient pᵀKp / pᵀp below which a search direction counts as singular
BREAKDOWN_TOLERANCE = 1e-14


class NumericalError(RuntimeError):
    """Raised when NaN/inf shows up during CG."""

    def __init__(self, message: str, iteration: int = 0):
        super().__init__(message)
        self.iteration = iteration


class SolverCancelled(RuntimeError):
    """Raised when the caller's cancel event is set during iteration."""

    def __init__(self, message: str, iteration: int = 0):
        super().__init__(message)
        self.iteration = iteration


class ConvergenceWarning(UserWarning):
    """Issued when CG stops without meeting the tolerance."""
    pass


@dataclass(frozen=True)
class CGResult:
    """
    Outcome of a CG solve.

    Attributes:
    -----------
    solution : np.ndarray
        Displacement vector (ndof,)
    iterations : int
        Iterations performed
    residual : float
        Final residual norm ‖r‖ (divided by ‖F‖ in relative mode)
    converged : bool
        True when residual < tolerance
    """
    solution: np.ndarray
    iterations: int
    residual: float
    converged: bool


def solve_cg(
    K: sparse.spmatrix,
    F: np.ndarray,
    x0: Optional[np.ndarray] = None,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: float = DEFAULT_TOLERANCE,
    cancel_event: Optional[threading.Event] = None,
    relative: bool = False,
) -> CGResult:
    """
    Solve K·u = F by unpreconditioned Conjugate Gradient.

    ALGORITHM:
    ----------
        x = x0 (or 0);  r = F − K·x;  p = r
        repeat:
            α = (r·r) / (p·K·p)
            x += α·p;  r −= α·K·p
            stop when ‖r‖ < tolerance
            β = (r_new·r_new) / (r·r);  p = r + β·p

    K must be symmetric positive definite (boundary conditions applied).
    A search direction with pᵀKp ≤ 0 (or vanishingly small) means the
    system is singular, typically a mechanism with missing supports; the
    solve stops there and reports converged=False.

    Args:
        K: Constrained global stiffness matrix (ndof x ndof), sparse or dense
        F: Constrained load vector (ndof,)
        x0: Starting guess; zeros when None
        max_iterations: Iteration cap (default 1000)
        tolerance: Residual target (default 1e-10)
        cancel_event: Checked once per iteration; when set, the solve stops
        relative: Test ‖r‖ / ‖F‖ instead of ‖r‖

    Returns:
        CGResult. Hitting max_iterations or a singular direction returns
        converged=False rather than raising; the caller decides what that
        means.

    Raises:
        NumericalError: NaN/inf encountered
        SolverCancelled: cancel_event was set
    """
    F = np.asarray(F, dtype=float)
    ndof = F.shape[0]

    if not np.all(np.isfinite(F)):
        raise NumericalError("Non-finite values in the load vector")

    f_norm = float(np.linalg.norm(F))
    if f_norm == 0.0:
        # Zero load: u = 0 exactly
        return CGResult(np.zeros(ndof), 0, 0.0, True)
    scale = f_norm if relative else 1.0

    x = np.zeros(ndof) if x0 is None else np.array(x0, dtype=float)
    r = F - K @ x
    p = r.copy()
    rs = float(r @ r)

    residual = float(np.sqrt(rs)) / scale
    if residual < tolerance:
        return CGResult(x, 0, residual, True)

    for iteration in range(1, max_iterations + 1):
        if cancel_event is not None and cancel_event.is_set():
            raise SolverCancelled(f"Solve cancelled at iteration {iteration}", iteration - 1)

        Kp = K @ p
        pKp = float(p @ Kp)
        if not np.isfinite(pKp):
            raise NumericalError(f"Non-finite pᵀKp in CG at iteration {iteration}", iteration)
        if pKp <= BREAKDOWN_TOLERANCE * float(p @ p):
            logger.warning(
                "CG breakdown at iteration %d (pᵀKp = %.3e); the system is singular, check supports",
                iteration, pKp,
            )
            return CGResult(x, iteration - 1, residual, False)

        alpha = rs / pKp
        x += alpha * p
        r -= alpha * Kp
        rs_new = float(r @ r)

        if not np.isfinite(rs_new) or not np.all(np.isfinite(x)):
            raise NumericalError(f"Non-finite values in CG at iteration {iteration}", iteration)

        residual = float(np.sqrt(rs_new)) / scale
        if residual < tolerance:
            logger.debug("CG converged in %d iterations (residual %.3e)", iteration, residual)
            return CGResult(x, iteration, residual, True)

        p = r + (rs_new / rs) * p
        rs = rs_new

    logger.warning("CG did not converge in %d iterations (residual %.3e)", max_iterations, residual)
    return CGResult(x, max_iterations, residual, False)
