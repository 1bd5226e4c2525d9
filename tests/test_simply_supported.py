import numpy as np

from framecheck import AnalysisOptions, analyze
from framecheck.model import Element, Load, Node, Structure, Supports
from framecheck.section import RectangularSection, section_properties


def test_simply_supported_midspan_pointload(steel):
    """
    We're testing a beam that's supported at both ends (like a bridge deck).
    A weight is placed in the middle. We want to know:
    1. How much force each support pushes back with (reactions)
    2. How much the beam bends downward at the middle (deflection)

    WHY THIS MATTERS:
    - In real life: bridges, floor beams, shelves
    - The supports here are NOT fixed, so this checks that released
      rotations really are free in the 3D model
    """

    # ========================================================================
    # STEP 1: DEFINE THE PHYSICAL PROBLEM
    # ========================================================================
    # A steel beam, 4 meters long, with a 1000 Newton weight in the middle

    L = 4.0      # Length of beam in meters
    P = 1000.0   # Applied load (N), pushing down (−z)
    section = RectangularSection(width=0.1, height=0.2)

    # ========================================================================
    # STEP 2: CREATE THE MODEL
    # ========================================================================
    # Node 0: left support  - pinned, plus rx held so the beam can't spin
    #                         about its own axis
    # Node 1: midspan       - free, carries the load
    # Node 2: right support - roller in z, y held against sideways rotation
    nodes = [
        Node(0, 0.0, 0.0, 0.0, Supports(ux=True, uy=True, uz=True, rx=True)),
        Node(1, L / 2, 0.0, 0.0),
        Node(2, L, 0.0, 0.0, Supports(uy=True, uz=True)),
    ]

    # Two elements so there is a node under the load
    elements = [
        Element(0, 0, 1, steel, section),
        Element(1, 1, 2, steel, section),
    ]

    loads = [Load('P', 1, 'z', -P)]

    # ========================================================================
    # STEP 3: SOLVE
    # ========================================================================
    # Shear deformation off: the textbook formula is Euler-Bernoulli
    result = analyze(Structure(nodes, elements, loads),
                     AnalysisOptions(include_shear_deformation=False))

    # ========================================================================
    # STEP 4: COMPARE TO TEXTBOOK ANSWER
    # ========================================================================
    # - Each support takes half the load (symmetry)
    # - Midspan deflection δ = PL³/(48EI), I of the uz/ry bending plane
    Iz = section_properties(section).Iz
    R_expected = P / 2.0
    delta_expected = -P * L ** 3 / (48 * steel.E * Iz)

    Rz_left = result.reactions[0][2]
    Rz_right = result.reactions[2][2]
    uz_midspan = result.displacements[1].uz

    assert result.converged
    assert np.isclose(Rz_left, R_expected, rtol=1e-3), \
        f"Left reaction {Rz_left} != expected {R_expected}"
    assert np.isclose(Rz_right, R_expected, rtol=1e-3), \
        f"Right reaction {Rz_right} != expected {R_expected}"
    assert np.isclose(uz_midspan, delta_expected, rtol=1e-3), \
        f"Midspan deflection {uz_midspan} != expected {delta_expected}"

    # Symmetry: the support rotations are equal and opposite
    assert np.isclose(result.displacements[0].ry, -result.displacements[2].ry, rtol=1e-6)

    print(f"✓ Left reaction: {Rz_left:.2f} N (expected: {R_expected:.2f} N)")
    print(f"✓ Right reaction: {Rz_right:.2f} N (expected: {R_expected:.2f} N)")
    print(f"✓ Midspan deflection: {uz_midspan:.6f} m (expected: {delta_expected:.6f} m)")


def test_midspan_moment_and_stress(steel):
    """
    Recovered end actions of the same beam:
    - left element, node-I end at the pinned support: M = 0, V = P/2
    - right element, node-I end at midspan: M = PL/4
    """
    L, P = 4.0, 1000.0
    section = RectangularSection(width=0.1, height=0.2)
    nodes = [
        Node(0, 0.0, 0.0, 0.0, Supports(ux=True, uy=True, uz=True, rx=True)),
        Node(1, L / 2, 0.0, 0.0),
        Node(2, L, 0.0, 0.0, Supports(uy=True, uz=True)),
    ]
    elements = [Element(0, 0, 1, steel, section), Element(1, 1, 2, steel, section)]
    result = analyze(Structure(nodes, elements, [Load('P', 1, 'z', -P)]),
                     AnalysisOptions(include_shear_deformation=False))

    # Left element, node-I end at the pinned support
    left = result.forces[0]
    assert np.isclose(abs(left.Vz), P / 2, rtol=1e-6)
    assert abs(left.My) < 1e-6 * P * L

    # Right element, node-I end at midspan
    right = result.forces[1]
    assert np.isclose(abs(right.My), P * L / 4, rtol=1e-6)
