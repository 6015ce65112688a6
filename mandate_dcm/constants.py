"""
Centralized Constants for the Mandate Calculator
================================================

This module defines all magic numbers and lookup tables used across the
package. Import from here to ensure consistency and avoid hardcoded values.

Usage:
    from mandate_dcm.constants import RANDOM_SEED, N_DRAWS_DEFAULT
    # or
    import mandate_dcm.constants as C
    lives_total = lives_per_100k / C.LIVES_SCALE * population

Authors: Mandate DCM Team
"""

# =============================================================================
# SIMULATION DEFAULTS
# =============================================================================

# Seed for the fixed panel of mixed logit draws.
# Change only when a new panel is wanted; every estimate depends on it.
RANDOM_SEED = 123456789

# Monte Carlo draws used to integrate over taste heterogeneity
N_DRAWS_DEFAULT = 1000

# Percentiles reported for the per-draw support distribution
SUPPORT_PERCENTILES = (5, 25, 50, 75, 95)


# =============================================================================
# ATTRIBUTE NAMES
# =============================================================================

# Fixed attribute order shared by coefficient vectors and draw panels:
# ASC mandate, ASC opt-out, scope, exemptions (2), coverage (2), lives saved
ATTRIBUTE_NAMES = (
    'asc_mandate',
    'asc_optout',
    'scope_all',
    'exemption_medrel',
    'exemption_medrelpers',
    'coverage_70',
    'coverage_90',
    'lives_saved',
)

# Lives saved are expressed per 100,000 people
LIVES_SCALE = 100000.0


# =============================================================================
# MIXED LOGIT COEFFICIENTS
# =============================================================================

# Means by country -> outbreak severity -> attribute
MXL_MEANS = {
    'AU': {
        'mild': {
            'asc_mandate': 0.464, 'asc_optout': -0.572,
            'scope_all': -0.319,
            'exemption_medrel': -0.157, 'exemption_medrelpers': -0.267,
            'coverage_70': 0.171, 'coverage_90': 0.158,
            'lives_saved': 0.072,
        },
        'severe': {
            'asc_mandate': 0.535, 'asc_optout': -0.694,
            'scope_all': 0.190,
            'exemption_medrel': -0.181, 'exemption_medrelpers': -0.305,
            'coverage_70': 0.371, 'coverage_90': 0.398,
            'lives_saved': 0.079,
        },
    },
    'IT': {
        'mild': {
            'asc_mandate': 0.625, 'asc_optout': -0.238,
            'scope_all': -0.276,
            'exemption_medrel': -0.176, 'exemption_medrelpers': -0.289,
            'coverage_70': 0.185, 'coverage_90': 0.148,
            'lives_saved': 0.039,
        },
        'severe': {
            'asc_mandate': 0.799, 'asc_optout': -0.463,
            'scope_all': 0.174,
            'exemption_medrel': -0.178, 'exemption_medrelpers': -0.207,
            'coverage_70': 0.305, 'coverage_90': 0.515,
            'lives_saved': 0.045,
        },
    },
    'FR': {
        'mild': {
            'asc_mandate': 0.899, 'asc_optout': 0.307,
            'scope_all': -0.160,
            'exemption_medrel': -0.121, 'exemption_medrelpers': -0.124,
            'coverage_70': 0.232, 'coverage_90': 0.264,
            'lives_saved': 0.049,
        },
        'severe': {
            'asc_mandate': 0.884, 'asc_optout': 0.083,
            'scope_all': -0.019,
            'exemption_medrel': -0.192, 'exemption_medrelpers': -0.247,
            'coverage_70': 0.267, 'coverage_90': 0.398,
            'lives_saved': 0.052,
        },
    },
}

# Standard deviations of the normally distributed random coefficients
MXL_SDS = {
    'AU': {
        'mild': {
            'asc_mandate': 1.104, 'asc_optout': 5.340,
            'scope_all': 1.731,
            'exemption_medrel': 0.443, 'exemption_medrelpers': 1.254,
            'coverage_70': 0.698, 'coverage_90': 1.689,
            'lives_saved': 0.101,
        },
        'severe': {
            'asc_mandate': 1.019, 'asc_optout': 5.021,
            'scope_all': 1.756,
            'exemption_medrel': 0.722, 'exemption_medrelpers': 1.252,
            'coverage_70': 0.641, 'coverage_90': 1.548,
            'lives_saved': 0.103,
        },
    },
    'IT': {
        'mild': {
            'asc_mandate': 1.560, 'asc_optout': 4.748,
            'scope_all': 1.601,
            'exemption_medrel': 0.718, 'exemption_medrelpers': 1.033,
            'coverage_70': 0.615, 'coverage_90': 1.231,
            'lives_saved': 0.080,
        },
        'severe': {
            'asc_mandate': 1.518, 'asc_optout': 4.194,
            'scope_all': 1.448,
            'exemption_medrel': 0.575, 'exemption_medrelpers': 1.082,
            'coverage_70': 0.745, 'coverage_90': 1.259,
            'lives_saved': 0.082,
        },
    },
    'FR': {
        'mild': {
            'asc_mandate': 1.560, 'asc_optout': 4.138,
            'scope_all': 1.258,
            'exemption_medrel': 0.818, 'exemption_medrelpers': 0.972,
            'coverage_70': 0.550, 'coverage_90': 1.193,
            'lives_saved': 0.081,
        },
        'severe': {
            'asc_mandate': 1.601, 'asc_optout': 3.244,
            'scope_all': 1.403,
            'exemption_medrel': 0.690, 'exemption_medrelpers': 1.050,
            'coverage_70': 0.548, 'coverage_90': 1.145,
            'lives_saved': 0.085,
        },
    },
}


# =============================================================================
# COST DEFAULTS
# =============================================================================

# Stylised annual implementation costs per 1 million people, local currency
COST_DEFAULTS_PER_MILLION = {
    'AU': {
        'it_systems': 1200000, 'communications': 800000,
        'enforcement': 1800000, 'compensation': 2200000,
        'admin': 800000, 'other': 500000,
    },
    'FR': {
        'it_systems': 1000000, 'communications': 700000,
        'enforcement': 1500000, 'compensation': 1800000,
        'admin': 700000, 'other': 400000,
    },
    'IT': {
        'it_systems': 900000, 'communications': 600000,
        'enforcement': 1400000, 'compensation': 1600000,
        'admin': 600000, 'other': 400000,
    },
}

# Fallback country when no cost defaults exist
COST_DEFAULT_COUNTRY = 'AU'

# Severe outbreaks need more enforcement and compensation capacity
COST_OUTBREAK_MULTIPLIER = {
    'mild': 0.8,
    'severe': 1.3,
}

COST_COMPONENT_LABELS = {
    'it_systems': 'Digital systems & infrastructure',
    'communications': 'Communications & public information',
    'enforcement': 'Enforcement & compliance',
    'compensation': 'Adverse-event monitoring & compensation',
    'admin': 'Administration & programme management',
    'other': 'Other mandate-specific costs',
}


# =============================================================================
# BENEFIT VALUATION
# =============================================================================

BENEFIT_METRIC_DEFAULTS = {
    'vsl': {'AU': 5400000, 'FR': 3000000, 'IT': 2800000},
    'vsly': {'AU': 230000, 'FR': 100000, 'IT': 80000},
    'qalys': {'AU': 50000, 'FR': 40000, 'IT': 30000},
    'healthsys': {'AU': 100000, 'FR': 80000, 'IT': 60000},
}

BENEFIT_METRIC_LABELS = {
    'vsl': 'Value of statistical life (per life saved)',
    'vsly': 'Value of a statistical life-year (per life-year gained)',
    'qalys': 'Monetary value per QALY gained',
    'healthsys': 'Average health system cost savings per life saved',
}

CURRENCY_BY_COUNTRY = {
    'AU': 'AUD',
    'FR': 'EUR',
    'IT': 'EUR',
}

DEFAULT_CURRENCY_LABEL = 'local currency units'


# =============================================================================
# STATUS THRESHOLDS
# =============================================================================

# Support bands in percent: below LOW is "low", below HIGH is "medium"
SUPPORT_LOW_PCT = 50.0
SUPPORT_HIGH_PCT = 70.0

# BCR bands: below UNFAVOURABLE is "unfavourable", below FAVOURABLE "uncertain"
BCR_UNFAVOURABLE = 0.8
BCR_FAVOURABLE = 1.0

# MRS rows shown to users
MAX_MRS_ROWS = 3


# =============================================================================
# VALIDATION
# =============================================================================

def validate_n_draws(n_draws: int) -> bool:
    """Check that a draw count is a positive integer."""
    return isinstance(n_draws, int) and not isinstance(n_draws, bool) and n_draws > 0


def validate_seed(seed: int) -> bool:
    """Check that a seed is an integer (bools excluded)."""
    return isinstance(seed, int) and not isinstance(seed, bool)
