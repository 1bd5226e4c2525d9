# tests/test_analysis.py
"""
ORCHESTRATOR TESTS: Status, Failure Modes, Serialization
========================================================

analyze() has three ways to end:

    success / warning   DONE, numbers valid (warning = notes were recorded)
    failed              FAILED, zero-filled numbers, message in errors
    ValidationError     raised before any matrix work (see test_model.py)
"""

import json
import math
import threading
from dataclasses import replace

import pytest

from framecheck import (
    AnalysisEngine,
    AnalysisOptions,
    AnalysisStage,
    ConvergenceWarning,
    Material,
    analyze,
)
from framecheck.model import Element, Load, Node, Structure, Supports


class _CancelAfter(threading.Event):
    """Reports set from the n-th poll on."""

    def __init__(self, polls):
        super().__init__()
        self.polls = polls

    def is_set(self):
        self.polls -= 1
        return self.polls <= 0


class TestSuccessfulAnalysis:

    def test_portal_frame_succeeds(self, portal_frame):
        result = analyze(portal_frame)

        assert result.status == 'success'
        assert result.stage is AnalysisStage.DONE
        assert result.converged
        assert result.is_valid
        assert result.compliant
        assert result.warnings == [] and result.errors == []

    def test_summary_values(self, portal_frame):
        result = analyze(portal_frame)

        assert result.max_displacement == max(
            abs(c) for d in result.displacements.values() for c in d.translation
        )
        assert result.max_stress == max(s.combined for s in result.stresses.values())
        assert result.performance.matrix_size == 24
        assert result.performance.nonzeros > 0
        assert result.performance.solution_time >= 0.0

    def test_safety_and_optimization_attached(self, portal_frame):
        result = analyze(portal_frame)

        assert set(result.safety.elements) == {'C1', 'B1', 'C2'}
        assert result.safety.overall_safety_factor > 1.0
        assert 0.0 <= result.optimization.material_efficiency <= 1.0

    def test_non_compliance_is_a_warning(self, cantilever):
        """The cantilever has no live load: numbers are fine, the report is not."""
        result = analyze(cantilever)

        assert result.status == 'warning'
        assert result.converged
        assert not result.compliant
        assert any("SNI 1727" in note for note in result.warnings)

    def test_overstressed_structure_is_invalid(self, cantilever):
        weak = Material(name="weak", kind='concrete', E=25e9, ultimate_strength=1e6)
        structure = replace(cantilever, elements=tuple(
            replace(e, material=weak) for e in cantilever.elements
        ))
        result = analyze(structure)

        assert not result.is_valid
        assert result.status == 'warning'
        assert 'AB' in result.safety.critical_elements

    def test_engine_matches_function(self, portal_frame):
        options = AnalysisOptions(include_shear_deformation=False)
        engine = AnalysisEngine(options)

        a = engine.analyze(portal_frame)
        b = analyze(portal_frame, options)

        assert a.displacements == b.displacements
        assert a.status == b.status


class TestConvergenceAndFailure:

    def test_iteration_cap_is_not_fatal(self, portal_frame):
        with pytest.warns(ConvergenceWarning):
            result = analyze(portal_frame, AnalysisOptions(max_iterations=1))

        assert not result.converged
        assert result.status == 'warning'
        assert result.stage is AnalysisStage.DONE
        assert result.iterations == 1
        assert any("did not converge" in note for note in result.warnings)

    def test_cancelled_analysis_fails(self, portal_frame):
        cancel = threading.Event()
        cancel.set()

        result = analyze(portal_frame, cancel_event=cancel)

        assert result.failed
        assert result.status == 'failed'
        assert not result.is_valid
        assert result.errors
        # zero-filled, never missing
        assert len(result.displacements) == 4
        assert len(result.forces) == 3 and len(result.stresses) == 3
        assert all(s.combined == 0.0 for s in result.stresses.values())
        assert result.compliance is None

    def test_non_finite_stiffness_fails(self, cantilever):
        broken = Material(name="broken", kind='concrete', E=math.nan, ultimate_strength=25e6)
        structure = replace(cantilever, elements=tuple(
            replace(e, material=broken) for e in cantilever.elements
        ))

        result = analyze(structure)

        assert result.status == 'failed'
        assert result.stage is AnalysisStage.FAILED
        assert result.displacements['B'].uz == 0.0
        assert "Non-finite" in result.errors[0]

    def test_torsion_mechanism_is_not_fatal(self, steel, beam_section):
        """
        Pinned at both ends with rx free everywhere: the beam can spin about
        its own axis, so an end torque has no equilibrium.
        """
        pinned = Supports(ux=True, uy=True, uz=True)
        structure = Structure(
            [Node('A', 0.0, 0.0, 0.0, pinned), Node('B', 5.0, 0.0, 0.0, pinned)],
            [Element('AB', 'A', 'B', steel, beam_section)],
            [Load('T', 'B', 'rx', 1000.0)],
        )

        with pytest.warns(ConvergenceWarning):
            result = analyze(structure)

        assert not result.converged
        assert not result.failed
        assert result.status == 'warning'
        assert result.stage is AnalysisStage.DONE
        assert result.errors == []
        assert 0 < result.iterations < AnalysisOptions().max_iterations
        assert any("under-constrained" in note for note in result.warnings)

    def test_unsupported_structure_is_not_fatal(self, steel, beam_section):
        structure = Structure(
            [Node('A', 0.0, 0.0, 0.0), Node('B', 5.0, 0.0, 0.0)],
            [Element('AB', 'A', 'B', steel, beam_section)],
            [Load('P', 'B', 'z', -10_000.0)],
        )

        with pytest.warns(ConvergenceWarning):
            result = analyze(structure)

        assert not result.converged
        assert result.status == 'warning'
        assert result.errors == []
        assert result.warnings
        assert result.reactions == {}

    def test_failed_result_keeps_iteration_count(self, portal_frame):
        result = analyze(portal_frame, cancel_event=_CancelAfter(3))

        assert result.failed
        assert result.iterations == 2


class TestSerialization:

    def test_as_dict_is_strict_json(self, portal_frame):
        data = analyze(portal_frame).as_dict()
        text = json.dumps(data, allow_nan=False)

        assert json.loads(text)['status'] == 'success'
        assert len(data['displacements']) == 4
        assert data['displacements'][0]['node'] == 1
        assert {r['node'] for r in data['reactions']} == {1, 4}

    def test_unloaded_element_serializes(self, portal_frame):
        """An unloaded structure has infinite safety factors; they become None."""
        data = analyze(replace(portal_frame, loads=())).as_dict()
        json.dumps(data, allow_nan=False)

        assert data['safety']['overall_safety_factor'] is None
        assert all(e['safety_factor'] is None for e in data['safety']['elements'])

    def test_failed_result_serializes(self, portal_frame):
        cancel = threading.Event()
        cancel.set()
        data = analyze(portal_frame, cancel_event=cancel).as_dict()

        json.dumps(data, allow_nan=False)
        assert data['stage'] == 'failed'
        assert data['compliance'] is None
