"""
Policy Calculator Session
=========================

Owns the process-wide state of the calculator (coefficient table and fixed
draw panel) and exposes the three operations consumed by collaborators:

    estimate_support(config)                        -> float | None
    compute_mrs(config)                             -> list[MRSRow]
    compute_derived_metrics(settings, config, costs) -> DerivedMetrics | None

The draw panel is generated once, when the calculator is constructed, and is
never regenerated; every evaluation in the session reuses it.

Usage:
    from mandate_dcm.policy_analysis import PolicyCalculator

    calc = PolicyCalculator()
    calc.estimate_support(config)

    # or the module-level functions bound to a lazily created default session
    from mandate_dcm import estimate_support
    estimate_support(config)

Author: Mandate DCM Team
"""

from typing import List, Optional

from ..config_schema import PolicyConfiguration
from ..models.coefficients import CoefficientTable, default_coefficient_table
from ..models.mixed_logit import MixedLogitSimulator, SupportDistributionResult
from ..simulation.draws import DrawPanel, generate_draw_panel
from ..utils.logging_config import get_logger
from .base import CalculatorConfig, CostBreakdown, Settings
from .cost_benefit import CostBenefitAggregator, DerivedMetrics, default_costs
from .mrs import MRSCalculator, MRSRow

logger = get_logger(__name__)


class PolicyCalculator:
    """
    Calculator session holding the coefficient table and draw panel.

    Example:
        >>> calc = PolicyCalculator(CalculatorConfig(seed=123456789, n_draws=1000))
        >>> metrics = calc.compute_derived_metrics(settings, config, costs)
    """

    def __init__(self,
                 config: Optional[CalculatorConfig] = None,
                 panel: Optional[DrawPanel] = None):
        """
        Initialize the session.

        Args:
            config: Session configuration (defaults if not provided)
            panel: Pre-generated draw panel to share; generated from
                config.seed / config.n_draws if not provided
        """
        self.config = config or CalculatorConfig()
        self.table: CoefficientTable = (self.config.coefficients
                                     if self.config.coefficients is not None
                                     else default_coefficient_table())
        logger.debug(f"Coefficient table loaded: {len(self.table)} country/severity entries")

        if panel is None:
            panel = generate_draw_panel(seed=self.config.seed, n_draws=self.config.n_draws)
            logger.debug(
                f"Draw panel generated: {panel.n_draws} draws x {panel.n_attributes} "
                f"attributes (seed={panel.seed})"
            )
        self.panel = panel

        self.simulator = MixedLogitSimulator(self.table, self.panel)
        self.mrs_calculator = MRSCalculator(self.table, max_rows=self.config.max_mrs_rows)
        self.aggregator = CostBenefitAggregator(self.simulator.simulate)

    def estimate_support(self, config: Optional[PolicyConfiguration]) -> Optional[float]:
        """Simulated support probability, or None if no estimate exists."""
        support = self.simulator.simulate(config)
        if support is None and config is not None:
            logger.debug(
                f"No coefficients for {config.country.value}/{config.outbreak_severity.value}"
            )
        return support

    def support_distribution(self,
                             config: Optional[PolicyConfiguration]
                             ) -> Optional[SupportDistributionResult]:
        """Per-draw support distribution, or None if no estimate exists."""
        return self.simulator.simulate_distribution(config)

    def compute_mrs(self, config: Optional[PolicyConfiguration]) -> List[MRSRow]:
        """Lives-saved equivalents for the configuration's design changes."""
        return self.mrs_calculator.compute(config)

    def compute_derived_metrics(self,
                                settings: Settings,
                                config: Optional[PolicyConfiguration],
                                costs: Optional[CostBreakdown] = None) -> Optional[DerivedMetrics]:
        """Derived metrics, or None if the configuration is missing."""
        return self.aggregator.compute(settings, config, costs)

    def default_costs(self,
                      settings: Settings,
                      config: Optional[PolicyConfiguration]) -> Optional[CostBreakdown]:
        """Stylised default costs for the configuration."""
        return default_costs(settings, config)


_DEFAULT_CALCULATOR: Optional[PolicyCalculator] = None


def get_default_calculator() -> PolicyCalculator:
    """The process-wide calculator, created (and its panel drawn) once."""
    global _DEFAULT_CALCULATOR
    if _DEFAULT_CALCULATOR is None:
        logger.info("Initialising default calculator session")
        _DEFAULT_CALCULATOR = PolicyCalculator()
    return _DEFAULT_CALCULATOR


def estimate_support(config: Optional[PolicyConfiguration]) -> Optional[float]:
    """Support probability using the default calculator."""
    return get_default_calculator().estimate_support(config)


def compute_mrs(config: Optional[PolicyConfiguration]) -> List[MRSRow]:
    """MRS rows using the default calculator."""
    return get_default_calculator().compute_mrs(config)


def compute_derived_metrics(settings: Settings,
                            config: Optional[PolicyConfiguration],
                            costs: Optional[CostBreakdown] = None) -> Optional[DerivedMetrics]:
    """Derived metrics using the default calculator."""
    return get_default_calculator().compute_derived_metrics(settings, config, costs)
