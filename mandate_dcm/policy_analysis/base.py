"""
Base Classes for Policy Analysis
================================

Core value objects and configuration for mandate policy analysis.

Classes:
- Settings: Population, valuation and currency inputs
- CostBreakdown: Six implementation cost components
- BenefitMetric: How a life saved is valued
- CalculatorConfig: Simulation configuration parameters

Authors: Mandate DCM Team
"""

import json
import math
from dataclasses import dataclass, field, fields, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..constants import (
    BENEFIT_METRIC_DEFAULTS,
    BENEFIT_METRIC_LABELS,
    COST_COMPONENT_LABELS,
    DEFAULT_CURRENCY_LABEL,
    MAX_MRS_ROWS,
    N_DRAWS_DEFAULT,
    RANDOM_SEED,
    validate_n_draws,
    validate_seed,
)
from ..config_schema import infer_currency_label
from ..models.coefficients import CoefficientTable


def _check_non_negative(owner: str, name: str, value) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{owner}.{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{owner}.{name} must be a number, got {value!r}")
    if not math.isfinite(number) or number < 0:
        raise ValueError(f"{owner}.{name} must be finite and >= 0, got {value!r}")
    return number


class BenefitMetric(Enum):
    """Monetary valuation basis for lives saved."""
    VSL = "vsl"
    VSLY = "vsly"
    QALYS = "qalys"
    HEALTH_SYSTEM = "healthsys"

    @property
    def label(self) -> str:
        return BENEFIT_METRIC_LABELS[self.value]

    def default_value(self, country) -> Optional[float]:
        """Default valuation for a country code (None if not tabulated)."""
        code = getattr(country, 'value', country)
        value = BENEFIT_METRIC_DEFAULTS[self.value].get(code)
        return float(value) if value is not None else None


@dataclass(frozen=True)
class Settings:
    """
    Evaluation settings supplied alongside a configuration.

    Attributes:
        population: Population exposed to the mandate
        valuation_per_unit: Monetary value per life saved
        currency_label: Display label, not used in calculations
        horizon_years: Evaluation horizon (used for default costs only)
        benefit_metric: Valuation basis for valuation_per_unit
    """
    population: float = 1000000.0
    valuation_per_unit: float = 5400000.0
    currency_label: str = DEFAULT_CURRENCY_LABEL
    horizon_years: float = 1.0
    benefit_metric: BenefitMetric = BenefitMetric.VSL

    def __post_init__(self):
        object.__setattr__(self, 'population',
                           _check_non_negative('Settings', 'population', self.population))
        object.__setattr__(self, 'valuation_per_unit',
                           _check_non_negative('Settings', 'valuation_per_unit',
                                               self.valuation_per_unit))
        horizon = _check_non_negative('Settings', 'horizon_years', self.horizon_years)
        if horizon == 0:
            raise ValueError("Settings.horizon_years must be > 0")
        object.__setattr__(self, 'horizon_years', horizon)
        if not isinstance(self.benefit_metric, BenefitMetric):
            object.__setattr__(self, 'benefit_metric', BenefitMetric(self.benefit_metric))

    @classmethod
    def for_country(cls,
                    country,
                    population: float = 1000000.0,
                    benefit_metric: BenefitMetric = BenefitMetric.VSL,
                    horizon_years: float = 1.0) -> 'Settings':
        """Settings with the country's default valuation and currency."""
        metric = BenefitMetric(getattr(benefit_metric, 'value', benefit_metric))
        return cls(
            population=population,
            valuation_per_unit=metric.default_value(country) or 0.0,
            currency_label=infer_currency_label(country),
            horizon_years=horizon_years,
            benefit_metric=metric
        )


@dataclass(frozen=True)
class CostBreakdown:
    """
    Implementation costs over the evaluation horizon.

    All components default to 0, meaning "not entered".
    """
    it_systems: float = 0.0
    communications: float = 0.0
    enforcement: float = 0.0
    compensation: float = 0.0
    admin: float = 0.0
    other: float = 0.0

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name,
                               _check_non_negative('CostBreakdown', f.name,
                                                   getattr(self, f.name)))

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'CostBreakdown':
        """Build from a mapping; unset or None components become 0."""
        data = data or {}
        unknown = sorted(set(data) - set(COST_COMPONENT_LABELS))
        if unknown:
            raise ValueError(f"Unknown cost components: {unknown}")
        return cls(**{k: v for k, v in data.items() if v is not None})

    @property
    def total(self) -> float:
        return sum(getattr(self, f.name) for f in fields(self))

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def largest_component(self) -> Optional[str]:
        """
        Name of the largest cost component.

        Returns None when no costs are entered. Ties go to the component
        listed first.
        """
        if self.total <= 0:
            return None
        best = None
        for f in fields(self):
            value = getattr(self, f.name)
            if best is None or value > getattr(self, best):
                best = f.name
        return best


@dataclass
class CalculatorConfig:
    """
    Configuration for a calculator session.

    Attributes:
        seed: Seed of the fixed draw panel
        n_draws: Number of Monte Carlo draws
        max_mrs_rows: Number of MRS rows returned to callers
        coefficients: Coefficient table (None uses the published table)
    """
    seed: int = RANDOM_SEED
    n_draws: int = N_DRAWS_DEFAULT
    max_mrs_rows: int = MAX_MRS_ROWS
    coefficients: Optional[CoefficientTable] = field(default=None, repr=False)

    def __post_init__(self):
        if not validate_seed(self.seed):
            raise ValueError(f"seed must be an integer, got {self.seed!r}")
        if not validate_n_draws(self.n_draws):
            raise ValueError(f"n_draws must be a positive integer, got {self.n_draws!r}")
        if not isinstance(self.max_mrs_rows, int) or self.max_mrs_rows < 0:
            raise ValueError(f"max_mrs_rows must be a non-negative integer, got {self.max_mrs_rows!r}")

    @classmethod
    def from_config_json(cls, config_path: Union[str, Path]) -> 'CalculatorConfig':
        """
        Load configuration from a JSON file.

        Expected layout (all sections optional):
            {
                "simulation": {"seed": int, "n_draws": int},
                "mrs": {"max_rows": int},
                "coefficients": {country: {severity: {"means": {...}, "sds": {...}}}}
            }

        Args:
            config_path: Path to config.json

        Returns:
            CalculatorConfig instance
        """
        with open(Path(config_path)) as f:
            config = json.load(f)
        if not isinstance(config, dict):
            raise ValueError(f"{config_path}: expected a JSON object")

        sim_cfg = config.get('simulation', {})
        mrs_cfg = config.get('mrs', {})
        for section, value in (('simulation', sim_cfg), ('mrs', mrs_cfg)):
            if not isinstance(value, dict):
                raise ValueError(f"{config_path}: '{section}' must be a JSON object")

        table = None
        if 'coefficients' in config:
            table = CoefficientTable.from_config(config['coefficients'])

        return cls(
            seed=sim_cfg.get('seed', RANDOM_SEED),
            n_draws=sim_cfg.get('n_draws', N_DRAWS_DEFAULT),
            max_mrs_rows=mrs_cfg.get('max_rows', MAX_MRS_ROWS),
            coefficients=table
        )
