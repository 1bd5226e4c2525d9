# tests/test_compliance.py
"""
COMPLIANCE RULE SETS: Thresholds and Report Shape
=================================================

The rule sets only need `max_displacement` from a result, so most tests feed
them a SimpleNamespace and check the boundary values of each rule.
"""

from dataclasses import replace
from types import SimpleNamespace

import pytest

from framecheck.catalog import Material
from framecheck.checks import (
    RULE_SETS,
    check_aci318,
    check_aisc360,
    check_compliance,
    check_concrete,
    check_loads,
    check_seismic,
    check_steel,
    max_span,
    structural_irregularity,
)
from framecheck.config import AnalysisOptions
from framecheck.model import Element, Load, Node, Structure

STILL = SimpleNamespace(max_displacement=0.0)


def with_material(structure, material):
    return replace(structure, elements=tuple(replace(e, material=material) for e in structure.elements))


def concrete_of(fc):
    return Material(name=f"fc{fc}", kind='concrete', E=25e9, ultimate_strength=fc * 1e6)


def steel_of(fy):
    return Material(name=f"fy{fy}", kind='steel', E=200e9, yield_strength=fy * 1e6)


def tower(concrete, beam_section, height, top_width=4.0):
    """Two-level frame: a 4 × 4 m base and a top level of top_width × top_width."""
    nodes = [
        Node('b1', 0, 0, 0), Node('b2', 4, 0, 0), Node('b3', 4, 4, 0), Node('b4', 0, 4, 0),
        Node('t1', 0, 0, height), Node('t2', top_width, 0, height),
        Node('t3', top_width, top_width, height), Node('t4', 0, top_width, height),
    ]
    elements = [Element(f"c{i}", f"b{i}", f"t{i}", concrete, beam_section) for i in range(1, 5)]
    return Structure(nodes, elements)


class TestGeometryHelpers:

    def test_max_span(self, portal_frame):
        assert max_span(portal_frame) == 4.0

    def test_max_span_default(self):
        assert max_span(Structure([Node(1, 0, 0, 0)], [])) == 10.0

    def test_regular_tower_has_no_irregularity(self, concrete, beam_section):
        assert structural_irregularity(tower(concrete, beam_section, 3.0)) == 0.0

    def test_setback_irregularity(self, concrete, beam_section):
        """Top level 2 × 2 on a 4 × 4 base: 1 − 4/16."""
        structure = tower(concrete, beam_section, 3.0, top_width=2.0)
        assert structural_irregularity(structure) == pytest.approx(0.75)

    def test_planar_frame_has_no_footprint(self, portal_frame):
        assert structural_irregularity(portal_frame) == 0.0


class TestSeismic:

    def test_low_regular_building_passes(self, portal_frame):
        result = check_seismic(portal_frame, STILL)

        assert result.code == 'SNI 1726'
        assert result.compliant
        assert result.warnings == []

    def test_tall_building_needs_dynamic_analysis(self, concrete, beam_section):
        result = check_seismic(tower(concrete, beam_section, 61.0), STILL)

        assert result.compliant
        assert any("Dynamic analysis" in r for r in result.requirements)
        assert len(result.warnings) == 1

    def test_irregular_building_warns(self, concrete, beam_section):
        result = check_seismic(tower(concrete, beam_section, 3.0, top_width=2.0), STILL)

        assert any("3D analysis" in r for r in result.requirements)
        assert any("irregularity" in w for w in result.warnings)

    @pytest.mark.parametrize("displacement, compliant", [(0.059, True), (0.061, False)])
    def test_drift_limit(self, portal_frame, displacement, compliant):
        """Height 3 m: 2% drift is 0.06 m."""
        result = check_seismic(portal_frame, SimpleNamespace(max_displacement=displacement))
        assert result.compliant is compliant


class TestLoads:

    def test_dead_and_live_present(self, portal_frame):
        result = check_loads(portal_frame, STILL)

        assert result.code == 'SNI 1727'
        assert result.compliant
        assert "Load factors: Dead=1.2, Live=1.6, Wind=1.6" in result.requirements

    def test_missing_live_load(self, cantilever):
        result = check_loads(cantilever, STILL)

        assert not result.compliant
        assert result.violations == ["Live load must be defined"]

    def test_unknown_case_warns(self, portal_frame):
        loads = portal_frame.loads + (Load('S', 3, 'z', -1.0, case='snow'),)
        result = check_loads(replace(portal_frame, loads=loads), STILL)

        assert result.compliant
        assert len(result.warnings) == 1
        assert "snow" in result.warnings[0]

    def test_configured_factors_are_listed(self, portal_frame):
        options = AnalysisOptions.from_dict({'load_factors': {'dead': 1.4}})
        result = check_loads(portal_frame, STILL, options)

        assert "Load factors: Dead=1.4, Live=1.6, Wind=1.6" in result.requirements


class TestConcrete:

    @pytest.mark.parametrize("fc, compliant", [(19.9, False), (20.0, True), (80.0, True)])
    def test_minimum_strength(self, portal_frame, fc, compliant):
        result = check_concrete(with_material(portal_frame, concrete_of(fc)), STILL)

        assert result.code == 'SNI 2847'
        assert result.compliant is compliant
        assert result.warnings == []

    def test_high_strength_warns(self, portal_frame):
        result = check_concrete(with_material(portal_frame, concrete_of(85.0)), STILL)

        assert result.compliant
        assert len(result.warnings) == 1

    @pytest.mark.parametrize("displacement, compliant", [(0.0159, True), (0.0161, False)])
    def test_deflection_limit(self, portal_frame, displacement, compliant):
        """Longest span 4 m: limit 4/250 = 16 mm."""
        result = check_concrete(portal_frame, SimpleNamespace(max_displacement=displacement))
        assert result.compliant is compliant

    def test_no_concrete_no_checks(self, portal_frame, steel):
        result = check_concrete(with_material(portal_frame, steel), SimpleNamespace(max_displacement=1.0))

        assert result.compliant
        assert result.requirements == []


class TestSteel:

    @pytest.mark.parametrize("fy, compliant, warned", [
        (239.0, False, False),
        (240.0, True, False),
        (550.0, True, False),
        (551.0, True, True),
    ])
    def test_yield_strength_limits(self, portal_frame, fy, compliant, warned):
        result = check_steel(with_material(portal_frame, steel_of(fy)), STILL)

        assert result.code == 'SNI 1729'
        assert result.compliant is compliant
        assert bool(result.warnings) is warned

    def test_missing_yield_uses_fallback(self, portal_frame):
        material = Material(name="plain", kind='steel', E=200e9)
        result = check_steel(with_material(portal_frame, material), STILL)

        assert result.compliant
        assert "Steel BJ 250 with fy = 250 MPa" in result.requirements

    def test_deflection_limit(self, portal_frame, steel):
        structure = with_material(portal_frame, steel)

        assert check_steel(structure, SimpleNamespace(max_displacement=4.0 / 300)).compliant
        assert not check_steel(structure, SimpleNamespace(max_displacement=0.014)).compliant

    def test_buckling_requirements_listed(self, portal_frame, steel):
        result = check_steel(with_material(portal_frame, steel), STILL)
        assert any("buckling" in r for r in result.requirements)


class TestReport:

    def test_international_sets_are_informational(self, portal_frame):
        huge = SimpleNamespace(max_displacement=100.0)

        for check in (check_aci318, check_aisc360):
            result = check(portal_frame, huge)
            assert result.compliant
            assert result.requirements
            assert result.violations == [] and result.warnings == []

    def test_default_rule_sets(self, portal_frame):
        report = check_compliance(portal_frame, STILL)

        assert list(report.results) == ['seismic', 'loads', 'concrete', 'steel']
        assert report.compliant

    def test_overall_is_and_of_sets(self, cantilever):
        """The cantilever has no live load."""
        report = check_compliance(cantilever, STILL)

        assert not report['loads'].compliant
        assert report['seismic'].compliant
        assert not report.compliant

    def test_selected_rule_sets_only(self, cantilever):
        options = AnalysisOptions(rule_sets=('aci318', 'aisc360'))
        report = check_compliance(cantilever, STILL, options)

        assert set(report.results) == {'aci318', 'aisc360'}
        assert report.compliant

    def test_as_dict(self, cantilever):
        data = check_compliance(cantilever, STILL).as_dict()

        assert data['compliant'] is False
        assert data['rule_sets']['loads']['violations'] == ["Live load must be defined"]

    def test_registry_covers_all_sets(self):
        assert set(RULE_SETS) == {'seismic', 'loads', 'concrete', 'steel', 'aci318', 'aisc360'}
