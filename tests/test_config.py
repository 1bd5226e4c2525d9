# tests/test_config.py
"""AnalysisOptions defaults, validation and the mapping builder."""

import pytest

from framecheck.config import DEFAULT_RULE_SETS, AnalysisOptions


def test_defaults():
    options = AnalysisOptions()

    assert options.analysis_type == 'linear'
    assert options.include_shear_deformation
    assert options.bc_method == 'elimination'
    assert options.max_iterations == 1000
    assert options.tolerance == 1e-6
    assert not options.relative_tolerance
    assert options.rule_sets == DEFAULT_RULE_SETS


def test_average_load_factor():
    assert AnalysisOptions().average_load_factor == pytest.approx(1.4)


def test_design_factor_by_kind():
    options = AnalysisOptions()

    assert options.design_factor('steel') == 0.6
    assert options.design_factor('Concrete') == 0.45
    assert options.design_factor('timber') == 1.0


@pytest.mark.parametrize("kwargs", [
    {'analysis_type': 'modal'},
    {'analysis_type': 'nonlinear'},
    {'bc_method': 'lagrange'},
    {'tolerance': 0.0},
    {'max_iterations': 0},
    {'rule_sets': ('seismic', 'eurocode')},
    {'load_factors': {'dead': 0.0, 'live': 0.0}},
    {'load_factors': {'dead': 1.2, 'live': 1.6, 'wind': -1.0}},
    {'design_factors': {'steel': 0.0}},
    {'default_design_factor': -0.5},
    {'deflection_limits': {'steel': 0.0}},
])
def test_invalid_options_raise(kwargs):
    with pytest.raises(ValueError):
        AnalysisOptions(**kwargs)


def test_from_dict_merges_factor_mappings():
    options = AnalysisOptions.from_dict({
        'load_factors': {'live': 1.8},
        'deflection_limits': {'steel': 360},
        'max_iterations': 50,
        'bc_method': None,
        'colour': 'blue',
    })

    assert options.load_factors == {'dead': 1.2, 'live': 1.8, 'wind': 1.6, 'seismic': 1.0}
    assert options.deflection_limits == {'concrete': 250.0, 'steel': 360.0}
    assert options.max_iterations == 50
    assert options.bc_method == 'elimination'
    assert options.average_load_factor == pytest.approx(1.5)


def test_from_dict_accepts_rule_set_list():
    options = AnalysisOptions.from_dict({'rule_sets': ['loads', 'aci318']})
    assert options.rule_sets == ('loads', 'aci318')


def test_as_dict_round_trip():
    options = AnalysisOptions(include_shear_deformation=False, max_height=40.0)
    assert AnalysisOptions.from_dict(options.as_dict()) == options


def test_from_dict_rejects_zero_load_factors():
    """Zero dead and live factors would leave allowable stress undefined."""
    with pytest.raises(ValueError):
        AnalysisOptions.from_dict({'load_factors': {'dead': 0, 'live': 0}})


def test_zero_wind_factor_is_allowed():
    options = AnalysisOptions.from_dict({'load_factors': {'wind': 0}})
    assert options.load_factors['wind'] == 0.0
