"""
Models module for the mandate calculator.

Coefficient tables and the mixed logit support simulator.

Usage:
    from mandate_dcm.models import MixedLogitSimulator, default_coefficient_table
"""

from .coefficients import (
    CoefficientSet,
    CoefficientTable,
    default_coefficient_table,
)
from .mixed_logit import (
    MixedLogitSimulator,
    SupportDistributionResult,
    design_vector,
    draw_coefficients,
    mandate_utilities,
    optout_utilities,
)

__all__ = [
    'CoefficientSet',
    'CoefficientTable',
    'default_coefficient_table',
    'MixedLogitSimulator',
    'SupportDistributionResult',
    'design_vector',
    'draw_coefficients',
    'mandate_utilities',
    'optout_utilities',
]
