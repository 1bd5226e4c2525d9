# tests/conftest.py
"""Shared structures for the framecheck tests."""

import pytest

from framecheck.catalog import Material
from framecheck.model import Element, Load, Node, Structure, Supports
from framecheck.section import RectangularSection


# Cantilever benchmark values
E_CONCRETE = 25e9
CANTILEVER_L = 5.0
CANTILEVER_P = 10_000.0


@pytest.fixture
def concrete():
    return Material(name="Test concrete", kind='concrete', E=E_CONCRETE, nu=0.2,
                    density=2400.0, ultimate_strength=25e6)


@pytest.fixture
def steel():
    return Material(name="Test steel", kind='steel', E=200e9, nu=0.3,
                    density=7850.0, yield_strength=250e6, ultimate_strength=410e6)


@pytest.fixture
def beam_section():
    return RectangularSection(width=0.3, height=0.5)


@pytest.fixture
def cantilever(concrete, beam_section):
    """
    Single element along x, fixed at A, tip load −P in z at B.

        A (0,0,0) ■━━━━━━━━━━━━━━━━━● B (5,0,0)
                                    ↓ P = 10 kN
    """
    nodes = [
        Node('A', 0.0, 0.0, 0.0, Supports.fixed()),
        Node('B', CANTILEVER_L, 0.0, 0.0),
    ]
    elements = [Element('AB', 'A', 'B', concrete, beam_section)]
    loads = [
        Load('P', 'B', 'z', -CANTILEVER_P, case='dead'),
    ]
    return Structure(nodes, elements, loads)


@pytest.fixture
def portal_frame(concrete, beam_section):
    """
    Fixed-base portal frame in the x-z plane.

        2 ━━━━━━━━━━━━━ 3       20 kN down at 2 and 3,
        ┃               ┃       5 kN lateral (x) at 2
        ┃               ┃
        1 ■           ■ 4
        (0,0,0)     (4,0,0), height 3 m
    """
    nodes = [
        Node(1, 0.0, 0.0, 0.0, Supports.fixed()),
        Node(2, 0.0, 0.0, 3.0),
        Node(3, 4.0, 0.0, 3.0),
        Node(4, 4.0, 0.0, 0.0, Supports.fixed()),
    ]
    elements = [
        Element('C1', 1, 2, concrete, beam_section, kind='column'),
        Element('B1', 2, 3, concrete, beam_section, kind='beam'),
        Element('C2', 4, 3, concrete, beam_section, kind='column'),
    ]
    loads = [
        Load('D2', 2, 'z', -10_000.0, case='dead'),
        Load('L2', 2, 'z', -10_000.0, case='live'),
        Load('D3', 3, 'z', -20_000.0, case='dead'),
        Load('W2', 2, 'x', 5_000.0, case='wind'),
    ]
    return Structure(nodes, elements, loads)
