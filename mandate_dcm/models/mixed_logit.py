"""
Mixed Logit Support Simulator
=============================

Predicts the probability that the population favours a vaccine mandate over
the opt-out alternative, integrating over taste heterogeneity by Monte Carlo.

Model Specification:
    β_r = μ + σ * z_r,   z_r ~ N(0, I)   (one draw per panel row)

    V_mandate = ASC_mandate
              + B_SCOPE_ALL      * [scope = all]
              + B_EX_MEDREL      * [exemptions = medical + religious]
              + B_EX_MEDRELPERS  * [exemptions = medical + religious + personal]
              + B_COV70          * [coverage = 70%]
              + B_COV90          * [coverage = 90%]
              + B_LIVES          * lives_saved_per_100k
    V_optout  = ASC_optout

    P_r     = 1 / (1 + exp(-(V_mandate - V_optout)))
    Support = (1/R) Σ_r P_r

Reference levels (scope high-risk, medical exemptions, 50% coverage)
contribute nothing beyond the intercept and lives-saved slope.

The logistic is evaluated with scipy.special.expit, which does not overflow
for extreme utility differences.

Author: Mandate DCM Team
"""

import numpy as np
import pandas as pd
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from scipy.special import expit

from ..config_schema import (
    CoverageThreshold,
    ExemptionPolicy,
    PolicyConfiguration,
    Scope,
)
from ..constants import ATTRIBUTE_NAMES, SUPPORT_PERCENTILES
from ..simulation.draws import DrawPanel
from .coefficients import CoefficientSet, CoefficientTable


# =============================================================================
# DESIGN CODING
# =============================================================================

def design_vector(config: PolicyConfiguration) -> np.ndarray:
    """
    Coding of a configuration against ATTRIBUTE_NAMES.

    The utility difference V_mandate - V_optout for coefficient vector β is
    β @ design_vector(config). The opt-out intercept enters with -1.

    Args:
        config: Policy configuration

    Returns:
        Array of length len(ATTRIBUTE_NAMES)
    """
    x = dict.fromkeys(ATTRIBUTE_NAMES, 0.0)
    x['asc_mandate'] = 1.0
    x['asc_optout'] = -1.0

    if config.scope is Scope.ALL:
        x['scope_all'] = 1.0

    if config.exemptions is ExemptionPolicy.MEDICAL_RELIGIOUS:
        x['exemption_medrel'] = 1.0
    elif config.exemptions is ExemptionPolicy.MEDICAL_RELIGIOUS_PERSONAL:
        x['exemption_medrelpers'] = 1.0

    if config.coverage_threshold is CoverageThreshold.PCT_70:
        x['coverage_70'] = 1.0
    elif config.coverage_threshold is CoverageThreshold.PCT_90:
        x['coverage_90'] = 1.0

    x['lives_saved'] = config.lives_saved_per_100k

    return np.array([x[a] for a in ATTRIBUTE_NAMES])


def draw_coefficients(coefs: CoefficientSet, panel: DrawPanel) -> np.ndarray:
    """
    Individual-level coefficients for every draw.

    Returns:
        Array of shape (n_draws, n_attributes): μ + σ * z
    """
    if tuple(panel.attribute_names) != tuple(ATTRIBUTE_NAMES):
        raise ValueError(
            f"Draw panel attributes {panel.attribute_names} do not match {ATTRIBUTE_NAMES}"
        )
    return coefs.mean_vector() + coefs.sd_vector() * panel.draws


def mandate_utilities(config: PolicyConfiguration, betas: np.ndarray) -> np.ndarray:
    """Mandate utility for each row of betas."""
    x = design_vector(config)
    x[ATTRIBUTE_NAMES.index('asc_optout')] = 0.0
    return betas @ x


def optout_utilities(betas: np.ndarray) -> np.ndarray:
    """Opt-out utility for each row of betas (intercept only)."""
    return betas[:, ATTRIBUTE_NAMES.index('asc_optout')]


# =============================================================================
# RESULTS
# =============================================================================

@dataclass
class SupportDistributionResult:
    """
    Per-draw support distribution for one configuration.

    Attributes:
        support: Mean probability of choosing the mandate
        std: Standard deviation of per-draw probabilities
        median: Median per-draw probability
        percentiles: {5: val, 25: val, 50: val, 75: val, 95: val}
        majority_share: Share of draws with probability above 0.5
        probabilities: Raw per-draw probabilities
    """
    support: float
    std: float
    median: float
    percentiles: Dict[int, float]
    majority_share: float
    probabilities: np.ndarray

    def __str__(self) -> str:
        p5 = self.percentiles.get(5, np.nan)
        p95 = self.percentiles.get(95, np.nan)
        return (f"Support = {self.support:.1%} "
                f"(SD: {self.std:.3f}, 90% range: [{p5:.1%}, {p95:.1%}])")


# =============================================================================
# SIMULATOR
# =============================================================================

class MixedLogitSimulator:
    """
    Monte Carlo support simulator for mandate configurations.

    The simulator holds references to an immutable coefficient table and
    draw panel; it keeps no other state, so repeated calls with the same
    configuration return identical results.

    Example:
        >>> simulator = MixedLogitSimulator(table, panel)
        >>> simulator.simulate(config)
        0.62...
    """

    def __init__(self, table: CoefficientTable, panel: DrawPanel):
        self.table = table
        self.panel = panel

    def coefficients_for(self, config: Optional[PolicyConfiguration]) -> Optional[CoefficientSet]:
        """Coefficient set for the configuration, or None if unavailable."""
        if config is None:
            return None
        return self.table.get(config.country, config.outbreak_severity)

    def choice_probabilities(self, config: Optional[PolicyConfiguration]) -> Optional[np.ndarray]:
        """
        Per-draw probability of choosing the mandate.

        Returns:
            Array of shape (n_draws,), or None if the configuration is
            missing or its country/severity is not in the table
        """
        coefs = self.coefficients_for(config)
        if coefs is None:
            return None

        betas = draw_coefficients(coefs, self.panel)
        diff = betas @ design_vector(config)
        return expit(diff)

    def simulate(self, config: Optional[PolicyConfiguration]) -> Optional[float]:
        """
        Simulated probability of supporting the mandate.

        Returns:
            Mean probability over all draws in [0, 1], or None when no
            valid estimate exists for the configuration
        """
        probs = self.choice_probabilities(config)
        if probs is None:
            return None
        return float(probs.sum() / probs.shape[0])

    def simulate_distribution(self,
                              config: Optional[PolicyConfiguration],
                              percentiles: Sequence[int] = SUPPORT_PERCENTILES
                              ) -> Optional[SupportDistributionResult]:
        """
        Distribution of per-draw support probabilities.

        Useful to show how divided opinion is: two configurations with the
        same mean support can differ widely in spread.
        """
        probs = self.choice_probabilities(config)
        if probs is None:
            return None

        pct_values = np.percentile(probs, list(percentiles))
        return SupportDistributionResult(
            support=float(probs.sum() / probs.shape[0]),
            std=float(np.std(probs)),
            median=float(np.median(probs)),
            percentiles={int(p): float(v) for p, v in zip(percentiles, pct_values)},
            majority_share=float(np.mean(probs > 0.5)),
            probabilities=probs
        )

    def support_sensitivity(self,
                            config: PolicyConfiguration,
                            lives_values: Sequence[float]) -> pd.DataFrame:
        """
        Support across alternative lives-saved values.

        Args:
            config: Base configuration (all other attributes held fixed)
            lives_values: Lives saved per 100k to evaluate

        Returns:
            DataFrame with columns lives_saved_per_100k and support
        """
        rows = []
        for lives in lives_values:
            modified = config.with_changes(lives_saved_per_100k=lives)
            rows.append({
                'lives_saved_per_100k': modified.lives_saved_per_100k,
                'support': self.simulate(modified)
            })
        return pd.DataFrame(rows, columns=['lives_saved_per_100k', 'support'])
