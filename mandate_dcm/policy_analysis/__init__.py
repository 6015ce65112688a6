"""
Policy Analysis Module for the Mandate Calculator
=================================================

Policy analysis tools built on the mixed logit support simulator:
- Lives-saved equivalents of design changes (MRS)
- Cost-benefit aggregation and default implementation costs
- Status classification and deltas between evaluations
- Scenario snapshots for side-by-side comparison

Usage:
    from mandate_dcm.config_schema import PolicyConfiguration
    from mandate_dcm.policy_analysis import (
        PolicyCalculator,
        Settings,
        CostBreakdown,
        ScenarioSet
    )

    config = PolicyConfiguration(
        country='AU', outbreak_severity='severe',
        scope='all', lives_saved_per_100k=10
    )
    settings = Settings.for_country('AU', population=1_000_000)

    calc = PolicyCalculator()
    support = calc.estimate_support(config)
    rows = calc.compute_mrs(config)
    metrics = calc.compute_derived_metrics(settings, config,
                                           calc.default_costs(settings, config))

    scenarios = ScenarioSet()
    scenarios.save(settings, config, None, metrics)

Authors: Mandate DCM Team
"""

# Base classes
from .base import (
    BenefitMetric,
    CalculatorConfig,
    CostBreakdown,
    Settings,
)

# Lives-saved equivalents
from .mrs import (
    Direction,
    MRSCalculator,
    MRSRow,
    mrs_value,
)

# Cost-benefit aggregation
from .cost_benefit import (
    BCRLevel,
    CostBenefitAggregator,
    DataCompleteness,
    DerivedMetrics,
    MetricsDelta,
    StatusSummary,
    SupportLevel,
    aggregate_metrics,
    classify_bcr,
    classify_status,
    classify_support,
    default_costs,
    metrics_delta,
)

# Calculator session
from .calculator import (
    PolicyCalculator,
    compute_derived_metrics,
    compute_mrs,
    estimate_support,
    get_default_calculator,
)

# Scenario comparison
from .scenarios import (
    Scenario,
    ScenarioSet,
)

__all__ = [
    # Base
    'BenefitMetric',
    'CalculatorConfig',
    'CostBreakdown',
    'Settings',

    # MRS
    'Direction',
    'MRSCalculator',
    'MRSRow',
    'mrs_value',

    # Cost-benefit
    'BCRLevel',
    'CostBenefitAggregator',
    'DataCompleteness',
    'DerivedMetrics',
    'MetricsDelta',
    'StatusSummary',
    'SupportLevel',
    'aggregate_metrics',
    'classify_bcr',
    'classify_status',
    'classify_support',
    'default_costs',
    'metrics_delta',

    # Calculator
    'PolicyCalculator',
    'compute_derived_metrics',
    'compute_mrs',
    'estimate_support',
    'get_default_calculator',

    # Scenarios
    'Scenario',
    'ScenarioSet',
]
