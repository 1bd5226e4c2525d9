# framecheck/kernel - Sparse linear-static solution core
"""
KERNEL: DOFS, ASSEMBLY, SUPPORTS, SOLVE
=======================================

This package turns a validated Structure into displacements:

- dof.py       node position → global DOF index
- assemble.py  sparse K (COO → CSR scatter-add) and load vector F
- boundary.py  elimination or penalty constraints
- solve.py     Conjugate Gradient with convergence diagnostics

Element stiffness lives in framecheck.elements; the kernel only needs
(dof_map, ke) pairs.
"""

from .dof import DOFManager
from .assemble import assemble, assemble_global_K, assemble_global_F
from .boundary import apply_boundary_conditions
from .solve import solve_cg, CGResult, NumericalError, SolverCancelled, ConvergenceWarning

__all__ = [
    'DOFManager',
    'assemble', 'assemble_global_K', 'assemble_global_F',
    'apply_boundary_conditions',
    'solve_cg', 'CGResult', 'NumericalError', 'SolverCancelled', 'ConvergenceWarning',
]
