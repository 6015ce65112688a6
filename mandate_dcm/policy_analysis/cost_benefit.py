"""
Cost-Benefit Aggregation
========================

Combine simulated support with population scaling and monetary valuation of
lives saved into headline cost-benefit metrics.

Key Formulas:
    lives_saved_total = lives_saved_per_100k / 100,000 * population
    benefit_monetary  = lives_saved_total * valuation_per_unit
    cost_total        = Σ cost components
    net_benefit       = benefit_monetary - cost_total
    bcr               = benefit_monetary / cost_total   (undefined if cost = 0)

A missing configuration yields no result (None), which callers must treat as
"not yet configured". Zero cost is a valid state: every field is populated
and only the BCR is undefined.

Also provides:
- Stylised default implementation costs by country and outbreak severity
- Status classification of support, BCR and input completeness
- Deltas between two sets of metrics ("what changed")

Author: Mandate DCM Team
"""

import math
import numpy as np
import pandas as pd
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Callable, Dict, Optional

from ..config_schema import PolicyConfiguration
from ..constants import (
    BCR_FAVOURABLE,
    BCR_UNFAVOURABLE,
    COST_COMPONENT_LABELS,
    COST_DEFAULT_COUNTRY,
    COST_DEFAULTS_PER_MILLION,
    COST_OUTBREAK_MULTIPLIER,
    LIVES_SCALE,
    SUPPORT_HIGH_PCT,
    SUPPORT_LOW_PCT,
)
from .base import CostBreakdown, Settings


# =============================================================================
# RESULTS
# =============================================================================

@dataclass(frozen=True)
class DerivedMetrics:
    """
    Output of one evaluation.

    Attributes:
        support_probability: Simulated support in [0, 1]; None when the
            coefficient table has no entry for the configuration
        lives_saved_total: Lives saved in the population
        benefit_monetary: Monetary value of lives saved
        cost_total: Total implementation cost (0 means not entered)
        net_benefit: Benefit minus cost
        bcr: Benefit-cost ratio; None when cost_total is 0
    """
    support_probability: Optional[float]
    lives_saved_total: float
    benefit_monetary: float
    cost_total: float
    net_benefit: float
    bcr: Optional[float]

    def __str__(self) -> str:
        support = ('n/a' if self.support_probability is None
                   else f"{self.support_probability:.1%}")
        bcr = 'not defined' if self.bcr is None else f"{self.bcr:.2f}"
        return (f"Support: {support} | Lives saved: {self.lives_saved_total:,.1f} | "
                f"Benefit: {self.benefit_monetary:,.0f} | Cost: {self.cost_total:,.0f} | "
                f"Net: {self.net_benefit:,.0f} | BCR: {bcr}")

    def to_dict(self) -> Dict[str, Optional[float]]:
        return asdict(self)


@dataclass(frozen=True)
class MetricsDelta:
    """
    Change between two evaluations.

    Attributes:
        support_pp: Support change in percentage points
        bcr: BCR change (None if either BCR is undefined)
        lives_saved: Change in lives saved
        cost: Change in total cost
    """
    support_pp: float
    bcr: Optional[float]
    lives_saved: float
    cost: float

    def __str__(self) -> str:
        bcr = '–' if self.bcr is None else f"{self.bcr:+.2f}"
        return (f"Support {self.support_pp:+.1f} pp | BCR {bcr} | "
                f"Lives {self.lives_saved:+.1f} | Cost {self.cost:+,.0f}")


class SupportLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    UNKNOWN = "unknown"


class BCRLevel(Enum):
    UNFAVOURABLE = "unfavourable"
    UNCERTAIN = "uncertain"
    FAVOURABLE = "favourable"
    NOT_DEFINED = "not defined"


class DataCompleteness(Enum):
    COMPLETE = "costs and benefit metric set"
    COSTS_MISSING = "benefit metric set, costs incomplete"
    BENEFIT_MISSING = "costs entered, benefit metric missing"
    INCOMPLETE = "incomplete"


@dataclass(frozen=True)
class StatusSummary:
    """Traffic-light classification of one evaluation."""
    support: SupportLevel
    bcr: BCRLevel
    data: DataCompleteness


# =============================================================================
# AGGREGATION
# =============================================================================

def aggregate_metrics(settings: Settings,
                      config: Optional[PolicyConfiguration],
                      costs: Optional[CostBreakdown],
                      support_probability: Optional[float]) -> Optional[DerivedMetrics]:
    """
    Aggregate support, benefits and costs into derived metrics.

    Pure function: identical inputs always give identical output.

    Args:
        settings: Population and valuation settings
        config: Policy configuration (None if not yet configured)
        costs: Cost breakdown (None is treated as all components zero)
        support_probability: Output of the support simulator

    Returns:
        DerivedMetrics, or None if config is None
    """
    if config is None:
        return None

    costs = costs if costs is not None else CostBreakdown()

    lives_total = (config.lives_saved_per_100k / LIVES_SCALE) * settings.population
    benefit = lives_total * settings.valuation_per_unit
    cost_total = costs.total

    return DerivedMetrics(
        support_probability=support_probability,
        lives_saved_total=lives_total,
        benefit_monetary=benefit,
        cost_total=cost_total,
        net_benefit=benefit - cost_total,
        bcr=benefit / cost_total if cost_total > 0 else None
    )


class CostBenefitAggregator:
    """
    Cost-benefit aggregator bound to a support estimator.

    Example:
        >>> aggregator = CostBenefitAggregator(simulator.simulate)
        >>> metrics = aggregator.compute(settings, config, costs)
        >>> metrics.bcr
        5.4
    """

    def __init__(self, support_estimator: Callable[[Optional[PolicyConfiguration]], Optional[float]]):
        """
        Args:
            support_estimator: Maps a configuration to a support probability
                (or None when no estimate exists)
        """
        self.support_estimator = support_estimator

    def compute(self,
                settings: Settings,
                config: Optional[PolicyConfiguration],
                costs: Optional[CostBreakdown] = None) -> Optional[DerivedMetrics]:
        """Derived metrics for a configuration (None if not configured)."""
        if config is None:
            return None
        return aggregate_metrics(settings, config, costs,
                                 self.support_estimator(config))

    def compare(self,
                settings: Settings,
                configs: Dict[str, PolicyConfiguration],
                costs: Optional[CostBreakdown] = None) -> pd.DataFrame:
        """
        Evaluate several configurations under the same settings and costs.

        Returns:
            DataFrame indexed by configuration name

        Raises:
            ValueError: If any named configuration is None
        """
        unset = [name for name, config in configs.items() if config is None]
        if unset:
            raise ValueError(f"No configuration given for {unset}")
        rows = []
        for name, config in configs.items():
            metrics = self.compute(settings, config, costs)
            row = {'name': name}
            row.update(metrics.to_dict())
            rows.append(row)
        return pd.DataFrame(rows).set_index('name')


# =============================================================================
# DEFAULT COSTS
# =============================================================================

def _round_half_up(x: float) -> float:
    return float(math.floor(x + 0.5))


def default_costs(settings: Settings, config: Optional[PolicyConfiguration]) -> Optional[CostBreakdown]:
    """
    Stylised implementation costs for a configuration.

    Per-million annual defaults for the country (falling back to AU), scaled
    by population / 1e6 * horizon_years * outbreak multiplier, rounded to
    whole currency units.

    Returns:
        CostBreakdown, or None if config is None
    """
    if config is None:
        return None

    per_million = COST_DEFAULTS_PER_MILLION.get(
        config.country.value, COST_DEFAULTS_PER_MILLION[COST_DEFAULT_COUNTRY])
    multiplier = COST_OUTBREAK_MULTIPLIER.get(config.outbreak_severity.value, 1.0)
    scale = (settings.population / 1e6) * settings.horizon_years * multiplier

    return CostBreakdown(**{
        name: _round_half_up(per_million[name] * scale)
        for name in COST_COMPONENT_LABELS
    })


# =============================================================================
# STATUS & DELTAS
# =============================================================================

def classify_support(support_probability: Optional[float]) -> SupportLevel:
    if support_probability is None or not np.isfinite(support_probability):
        return SupportLevel.UNKNOWN
    pct = support_probability * 100
    if pct < SUPPORT_LOW_PCT:
        return SupportLevel.LOW
    if pct < SUPPORT_HIGH_PCT:
        return SupportLevel.MEDIUM
    return SupportLevel.HIGH


def classify_bcr(bcr: Optional[float]) -> BCRLevel:
    if bcr is None:
        return BCRLevel.NOT_DEFINED
    if bcr < BCR_UNFAVOURABLE:
        return BCRLevel.UNFAVOURABLE
    if bcr < BCR_FAVOURABLE:
        return BCRLevel.UNCERTAIN
    return BCRLevel.FAVOURABLE


def classify_status(settings: Settings, metrics: DerivedMetrics) -> StatusSummary:
    """Support, BCR and data-completeness classification."""
    has_costs = metrics.cost_total > 0
    has_benefit = settings.valuation_per_unit > 0

    if has_costs and has_benefit:
        data = DataCompleteness.COMPLETE
    elif has_benefit:
        data = DataCompleteness.COSTS_MISSING
    elif has_costs:
        data = DataCompleteness.BENEFIT_MISSING
    else:
        data = DataCompleteness.INCOMPLETE

    return StatusSummary(
        support=classify_support(metrics.support_probability),
        bcr=classify_bcr(metrics.bcr),
        data=data
    )


def metrics_delta(before: Optional[DerivedMetrics],
                  after: Optional[DerivedMetrics]) -> Optional[MetricsDelta]:
    """
    What changed between two evaluations.

    Missing support is treated as 0. Returns None if either side is missing.
    """
    if before is None or after is None:
        return None

    bcr = None
    if before.bcr is not None and after.bcr is not None:
        bcr = after.bcr - before.bcr

    return MetricsDelta(
        support_pp=((after.support_probability or 0.0)
                    - (before.support_probability or 0.0)) * 100,
        bcr=bcr,
        lives_saved=after.lives_saved_total - before.lives_saved_total,
        cost=after.cost_total - before.cost_total
    )
