# framecheck/kernel/dof.py
"""
DOF MANAGER: Node Position → Global Degree of Freedom Indexing
==============================================================

PURPOSE:
--------
This module maps (node, local_dof) to global DOF indices for a 3D frame:

    6 DOF/node: 0 ux, 1 uy, 2 uz, 3 rx, 4 ry, 5 rz

Node ids are arbitrary hashables (ints, strings), so the manager is built
from the structure's node order: the node at position k owns global DOFs
6k .. 6k+5. Assembly, boundary conditions and recovery all go through the
same manager, so they can never disagree about numbering.

USAGE:
------
    dof = DOFManager.for_structure(structure)

    dof.idx('N2', 2)                 # uz of node 'N2'
    dof.element_dof_map(['N1', 'N2'])  # 12 indices for a frame element
"""

from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Sequence

from ..model import DOF_PER_NODE, Structure


@dataclass
class DOFManager:
    """
    Manages degree-of-freedom indexing for structural analysis.

    This is the bridge between "node 'N5', z-displacement" and "global DOF
    index 26".

    Attributes:
    -----------
    positions : Dict[Hashable, int]
        Node id → position in the structure's node sequence
    dof_per_node : int
        6 for 3D frames

    Examples:
    ---------
    >>> dof = DOFManager({'A': 0, 'B': 1})
    >>> dof.idx('B', 2)
    8
    >>> dof.ndof
    12
    """
    positions: Dict[Hashable, int] = field(default_factory=dict)
    dof_per_node: int = DOF_PER_NODE

    @classmethod
    def for_structure(cls, structure: Structure) -> 'DOFManager':
        return cls(structure.node_index())

    @property
    def ndof(self) -> int:
        """Total DOFs (size of K)."""
        return self.dof_per_node * len(self.positions)

    def idx(self, node_id: Hashable, local_dof: int) -> int:
        """
        Global DOF index for a node's local DOF.

        Parameters:
        -----------
        node_id : hashable
            The node identifier
        local_dof : int
            0=ux, 1=uy, 2=uz, 3=rx, 4=ry, 5=rz

        Returns:
        --------
        int
            Global DOF index in the system matrices
        """
        return self.dof_per_node * self.positions[node_id] + local_dof

    def node_dofs(self, node_id: Hashable) -> List[int]:
        """All global DOF indices of one node."""
        base = self.dof_per_node * self.positions[node_id]
        return list(range(base, base + self.dof_per_node))

    def element_dof_map(self, node_ids: Sequence[Hashable]) -> List[int]:
        """
        DOF map for an element connecting several nodes.

        These are the indices needed to scatter element matrices into the
        global matrices and to gather element displacements back out.

        Examples:
        ---------
        >>> DOFManager({'A': 0, 'B': 1}).element_dof_map(['B', 'A'])
        [6, 7, 8, 9, 10, 11, 0, 1, 2, 3, 4, 5]
        """
        result = []
        for node_id in node_ids:
            result.extend(self.node_dofs(node_id))
        return result
