"""
Policy Configuration Schema
===========================

This module defines the validated configuration object that every
calculation consumes. It provides:
1. Enumerations for each categorical design attribute
2. The immutable PolicyConfiguration value object
3. Schema validation for raw (dict / JSON) input

Configuration Structure:
------------------------
{
    "country": str,              # "AU", "IT" or "FR"
    "outbreak_severity": str,    # "mild" or "severe"
    "scope": str,                # "highrisk" or "all"
    "exemptions": str,           # "medical", "medrel" or "medrelpers"
    "coverage_threshold": float, # 0.5, 0.7 or 0.9
    "lives_saved_per_100k": float  # non-negative
}

Reference levels (no incremental utility): scope "highrisk",
exemptions "medical", coverage 0.5.

Authors: Mandate DCM Team
"""

import json
import math
import warnings
from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .constants import CURRENCY_BY_COUNTRY, DEFAULT_CURRENCY_LABEL


# =============================================================================
# ENUMS
# =============================================================================

class Country(Enum):
    """Countries with estimated preference coefficients."""
    AU = "AU"
    IT = "IT"
    FR = "FR"

    @property
    def label(self) -> str:
        return {'AU': 'Australia', 'IT': 'Italy', 'FR': 'France'}[self.value]


class Severity(Enum):
    """Outbreak severity scenario."""
    MILD = "mild"
    SEVERE = "severe"

    @property
    def label(self) -> str:
        return 'Mild / endemic' if self is Severity.MILD else 'Severe outbreak'


class Scope(Enum):
    """Who the mandate applies to. HIGH_RISK is the reference level."""
    HIGH_RISK = "highrisk"
    ALL = "all"

    @property
    def label(self) -> str:
        if self is Scope.HIGH_RISK:
            return 'High-risk occupations only'
        return 'All occupations & public spaces'


class ExemptionPolicy(Enum):
    """Permitted exemptions. MEDICAL is the reference level."""
    MEDICAL = "medical"
    MEDICAL_RELIGIOUS = "medrel"
    MEDICAL_RELIGIOUS_PERSONAL = "medrelpers"

    @property
    def label(self) -> str:
        return {
            'medical': 'Medical only',
            'medrel': 'Medical + religious',
            'medrelpers': 'Medical + religious + personal belief',
        }[self.value]


class CoverageThreshold(Enum):
    """Vaccination coverage at which the mandate is lifted. 50% is the reference."""
    PCT_50 = 0.5
    PCT_70 = 0.7
    PCT_90 = 0.9

    @property
    def label(self) -> str:
        return f"{int(round(self.value * 100))}% population vaccinated"


REFERENCE_LEVELS = {
    'scope': Scope.HIGH_RISK,
    'exemptions': ExemptionPolicy.MEDICAL,
    'coverage_threshold': CoverageThreshold.PCT_50,
}

REQUIRED_FIELDS = [
    'country',
    'outbreak_severity',
    'scope',
    'exemptions',
    'coverage_threshold',
    'lives_saved_per_100k',
]


class ConfigurationError(ValueError):
    """Raised when a policy configuration cannot be built from input."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid policy configuration:\n" + "\n".join(self.errors))


# =============================================================================
# PARSING HELPERS
# =============================================================================

def _parse_enum(enum_cls, value):
    """Parse a raw value into an enum member (case-insensitive for strings)."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        raw = value.strip()
        for member in enum_cls:
            if isinstance(member.value, str) and member.value.lower() == raw.lower():
                return member
            if member.name.lower() == raw.lower():
                return member
    raise ValueError(
        f"{value!r} is not a valid {enum_cls.__name__}; "
        f"expected one of {[m.value for m in enum_cls]}"
    )


def parse_coverage(value) -> CoverageThreshold:
    """
    Parse a coverage threshold.

    Accepts a CoverageThreshold, a fraction (0.7), a percentage (70)
    or their string forms.
    """
    if isinstance(value, CoverageThreshold):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{value!r} is not a valid coverage threshold")
    if number > 1.0:
        number = number / 100.0
    for member in CoverageThreshold:
        if math.isclose(number, member.value, abs_tol=1e-9):
            return member
    raise ValueError(
        f"{value!r} is not a valid coverage threshold; "
        f"expected one of {[m.value for m in CoverageThreshold]}"
    )


def parse_lives(value) -> float:
    """Parse lives saved per 100k; must be finite and non-negative."""
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a valid lives-saved value")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{value!r} is not a valid lives-saved value")
    if not math.isfinite(number) or number < 0:
        raise ValueError(f"lives_saved_per_100k must be finite and >= 0, got {value!r}")
    return number


# =============================================================================
# POLICY CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class PolicyConfiguration:
    """
    Immutable mandate design evaluated by the calculator.

    Attributes:
        country: Country whose preference estimates apply
        outbreak_severity: Outbreak scenario
        scope: Mandate scope
        exemptions: Permitted exemptions
        coverage_threshold: Coverage at which the mandate is lifted
        lives_saved_per_100k: Expected lives saved per 100,000 people
    """
    country: Country
    outbreak_severity: Severity
    scope: Scope = Scope.HIGH_RISK
    exemptions: ExemptionPolicy = ExemptionPolicy.MEDICAL
    coverage_threshold: CoverageThreshold = CoverageThreshold.PCT_50
    lives_saved_per_100k: float = 0.0

    def __post_init__(self):
        # Normalise raw values passed directly to the constructor
        object.__setattr__(self, 'country', _parse_enum(Country, self.country))
        object.__setattr__(self, 'outbreak_severity',
                           _parse_enum(Severity, self.outbreak_severity))
        object.__setattr__(self, 'scope', _parse_enum(Scope, self.scope))
        object.__setattr__(self, 'exemptions',
                           _parse_enum(ExemptionPolicy, self.exemptions))
        object.__setattr__(self, 'coverage_threshold',
                           parse_coverage(self.coverage_threshold))
        object.__setattr__(self, 'lives_saved_per_100k',
                           parse_lives(self.lives_saved_per_100k))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PolicyConfiguration':
        """
        Build a configuration from raw input.

        Raises:
            ConfigurationError: Listing every problem found
        """
        result = validate_policy_config(data)
        if not result.is_valid:
            raise ConfigurationError(result.errors)
        return cls(**{k: data[k] for k in REQUIRED_FIELDS})

    def with_changes(self, **changes) -> 'PolicyConfiguration':
        """Create a new configuration with some fields replaced."""
        values = {k: getattr(self, k) for k in REQUIRED_FIELDS}
        values.update(changes)
        return PolicyConfiguration(**values)

    def non_reference_attributes(self) -> List[str]:
        """Design attributes set away from their reference level."""
        return [name for name, ref in REFERENCE_LEVELS.items()
                if getattr(self, name) is not ref]

    def to_dict(self) -> Dict[str, Any]:
        """Plain-value dictionary (enum values unwrapped)."""
        out = asdict(self)
        for key, value in out.items():
            if isinstance(value, Enum):
                out[key] = value.value
        return out


# =============================================================================
# SCHEMA VALIDATION
# =============================================================================

@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def validate_policy_config(config: Dict[str, Any]) -> ValidationResult:
    """
    Validate raw configuration input against the schema.

    Args:
        config: Configuration dictionary

    Returns:
        ValidationResult with validity status and any errors/warnings
    """
    errors = []
    warnings_list = []

    if not isinstance(config, dict):
        return ValidationResult(False, [f"Configuration must be a mapping, got {type(config).__name__}"])

    for key in REQUIRED_FIELDS:
        if key not in config or config[key] is None:
            errors.append(f"Missing required key: {key}")

    parsers = {
        'country': lambda v: _parse_enum(Country, v),
        'outbreak_severity': lambda v: _parse_enum(Severity, v),
        'scope': lambda v: _parse_enum(Scope, v),
        'exemptions': lambda v: _parse_enum(ExemptionPolicy, v),
        'coverage_threshold': parse_coverage,
        'lives_saved_per_100k': parse_lives,
    }
    for key, parser in parsers.items():
        if config.get(key) is None:
            continue
        try:
            parser(config[key])
        except ValueError as e:
            errors.append(f"{key}: {e}")

    unknown = sorted(set(config) - set(REQUIRED_FIELDS))
    if unknown:
        warnings_list.append(f"Ignoring unknown keys: {unknown}")

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings_list
    )


def load_policy_config(config_path: Union[str, Path]) -> PolicyConfiguration:
    """
    Load and validate a policy configuration from a JSON file.

    Args:
        config_path: Path to a JSON file with the configuration keys

    Returns:
        Validated PolicyConfiguration

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    with open(config_path) as f:
        config = json.load(f)

    result = validate_policy_config(config)
    for w in result.warnings:
        warnings.warn(w, UserWarning)

    if not result.is_valid:
        raise ConfigurationError(result.errors)

    return PolicyConfiguration(**{k: config[k] for k in REQUIRED_FIELDS})


def infer_currency_label(country: Optional[Union[Country, str]]) -> str:
    """Default currency label for a country."""
    code = country.value if isinstance(country, Country) else country
    return CURRENCY_BY_COUNTRY.get(code, DEFAULT_CURRENCY_LABEL)
