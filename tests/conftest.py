"""
Pytest Configuration and Shared Fixtures
=========================================

Provides common test fixtures for mandate calculator testing.
"""

import pytest
from pathlib import Path
import sys
import json

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from mandate_dcm.config_schema import PolicyConfiguration
from mandate_dcm.constants import MXL_MEANS
from mandate_dcm.models.coefficients import CoefficientTable, default_coefficient_table
from mandate_dcm.models.mixed_logit import MixedLogitSimulator
from mandate_dcm.policy_analysis.base import CalculatorConfig, CostBreakdown, Settings
from mandate_dcm.policy_analysis.calculator import PolicyCalculator
from mandate_dcm.simulation.draws import generate_draw_panel


# =============================================================================
# Simulation Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def draw_panel():
    """Default panel: seed 123456789, 1000 draws."""
    return generate_draw_panel()


@pytest.fixture(scope="session")
def small_panel():
    """Small panel for quick tests."""
    return generate_draw_panel(seed=42, n_draws=200)


@pytest.fixture(scope="session")
def coefficient_table():
    """Published coefficient table."""
    return default_coefficient_table()


@pytest.fixture(scope="session")
def simulator(coefficient_table, draw_panel):
    """Simulator over the published table and default panel."""
    return MixedLogitSimulator(coefficient_table, draw_panel)


@pytest.fixture(scope="session")
def calculator(draw_panel):
    """Calculator session sharing the default panel."""
    return PolicyCalculator(CalculatorConfig(), panel=draw_panel)


# =============================================================================
# Coefficient Fixtures - Custom Tables with Known Properties
# =============================================================================

@pytest.fixture
def au_mild_only_table():
    """Table holding only the AU/mild entry."""
    return CoefficientTable.from_dicts({'AU': {'mild': MXL_MEANS['AU']['mild']}})


@pytest.fixture
def fixed_means():
    """Hand-picked means with a zero lives-saved slope."""
    return {
        'asc_mandate': 0.5,
        'asc_optout': -0.5,
        'scope_all': -0.2,
        'exemption_medrel': -0.1,
        'exemption_medrelpers': -0.3,
        'coverage_70': 0.2,
        'coverage_90': 0.3,
        'lives_saved': 0.0,
    }


@pytest.fixture
def zero_slope_table(fixed_means):
    """AU/severe table whose lives-saved mean is zero (no SDs)."""
    return CoefficientTable.from_dicts({'AU': {'severe': fixed_means}})


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def au_mild_config():
    """AU/mild reference design with 10 lives saved per 100k."""
    return PolicyConfiguration(
        country='AU',
        outbreak_severity='mild',
        lives_saved_per_100k=10
    )


@pytest.fixture
def au_severe_all_config():
    """AU/severe, all occupations, medical exemptions, 50% coverage."""
    return PolicyConfiguration(
        country='AU',
        outbreak_severity='severe',
        scope='all',
        exemptions='medical',
        coverage_threshold=0.5,
        lives_saved_per_100k=5
    )


@pytest.fixture
def default_settings():
    """One million people valued at 5.4M per life."""
    return Settings(population=1000000, valuation_per_unit=5400000)


@pytest.fixture
def hundred_million_costs():
    """Costs totalling 100M."""
    return CostBreakdown(enforcement=60000000, compensation=40000000)


@pytest.fixture
def calculator_config_file(tmp_path):
    """JSON calculator configuration with a one-entry coefficient table."""
    payload = {
        'simulation': {'seed': 7, 'n_draws': 50},
        'mrs': {'max_rows': 5},
        'coefficients': {
            'IT': {'mild': {'means': MXL_MEANS['IT']['mild'],
                            'sds': {'asc_mandate': 1.0}}}
        }
    }
    path = tmp_path / 'calculator.json'
    path.write_text(json.dumps(payload))
    return path


@pytest.fixture
def policy_config_file(tmp_path):
    """JSON policy configuration file."""
    payload = {
        'country': 'FR',
        'outbreak_severity': 'severe',
        'scope': 'all',
        'exemptions': 'medrel',
        'coverage_threshold': 70,
        'lives_saved_per_100k': 25,
    }
    path = tmp_path / 'policy.json'
    path.write_text(json.dumps(payload))
    return path

