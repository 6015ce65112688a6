"""
Mandate DCM
===========

Vaccine mandate policy calculator built on mixed logit preference estimates.

Usage:
    from mandate_dcm import (
        PolicyConfiguration,
        Settings,
        CostBreakdown,
        estimate_support,
        compute_mrs,
        compute_derived_metrics
    )

    config = PolicyConfiguration(country='AU', outbreak_severity='mild',
                                 lives_saved_per_100k=10)
    estimate_support(config)
"""

from .config_schema import (
    ConfigurationError,
    Country,
    CoverageThreshold,
    ExemptionPolicy,
    PolicyConfiguration,
    Scope,
    Severity,
    load_policy_config,
    validate_policy_config,
)
from .policy_analysis import (
    BenefitMetric,
    CalculatorConfig,
    CostBreakdown,
    DerivedMetrics,
    MRSRow,
    PolicyCalculator,
    ScenarioSet,
    Settings,
    compute_derived_metrics,
    compute_mrs,
    estimate_support,
)

__all__ = [
    'ConfigurationError',
    'Country',
    'CoverageThreshold',
    'ExemptionPolicy',
    'PolicyConfiguration',
    'Scope',
    'Severity',
    'load_policy_config',
    'validate_policy_config',
    'BenefitMetric',
    'CalculatorConfig',
    'CostBreakdown',
    'DerivedMetrics',
    'MRSRow',
    'PolicyCalculator',
    'ScenarioSet',
    'Settings',
    'compute_derived_metrics',
    'compute_mrs',
    'estimate_support',
]

__version__ = '1.0.0'
