"""
Mixed Logit Coefficient Table
=============================

Static lookup of mean and standard deviation utility coefficients, keyed by
country and outbreak severity. Tables are validated once at load time and
never mutated; lookups of a missing (country, severity) pair return None.

Usage:
    from mandate_dcm.models.coefficients import default_coefficient_table

    table = default_coefficient_table()
    coefs = table.get(Country.AU, Severity.SEVERE)
    coefs.mean('lives_saved')   # 0.079

Author: Mandate DCM Team
"""

import json
import math
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from ..config_schema import Country, Severity, _parse_enum
from ..constants import ATTRIBUTE_NAMES, MXL_MEANS, MXL_SDS


@dataclass(frozen=True)
class CoefficientSet:
    """
    Means and standard deviations for one (country, severity) pair.

    Attributes:
        country: Country code
        severity: Outbreak severity
        means: Attribute -> mean coefficient
        standard_deviations: Attribute -> SD of the random coefficient
    """
    country: Country
    severity: Severity
    means: Mapping[str, float]
    standard_deviations: Mapping[str, float]

    def __post_init__(self):
        missing = [a for a in ATTRIBUTE_NAMES if a not in self.means]
        if missing:
            raise ValueError(
                f"{self.country.value}/{self.severity.value}: missing mean coefficients {missing}"
            )
        unknown = sorted((set(self.means) | set(self.standard_deviations)) - set(ATTRIBUTE_NAMES))
        if unknown:
            raise ValueError(
                f"{self.country.value}/{self.severity.value}: unknown attributes {unknown}"
            )
        for attr, raw in list(self.means.items()) + list(self.standard_deviations.items()):
            if isinstance(raw, bool):
                raise ValueError(f"{self.country.value}/{self.severity.value}: "
                                 f"{attr} is not a number ({raw!r})")
            try:
                value = float(raw)
            except (TypeError, ValueError):
                raise ValueError(f"{self.country.value}/{self.severity.value}: "
                                 f"{attr} is not a number ({raw!r})") from None
            if not math.isfinite(value):
                raise ValueError(f"{self.country.value}/{self.severity.value}: "
                                 f"{attr} is not finite ({value})")
        negative = [a for a, v in self.standard_deviations.items() if float(v) < 0]
        if negative:
            raise ValueError(
                f"{self.country.value}/{self.severity.value}: negative standard deviations {negative}"
            )

        object.__setattr__(self, 'means', MappingProxyType(
            {a: float(self.means[a]) for a in ATTRIBUTE_NAMES}))
        # Absent SDs mean a fixed (non-random) coefficient
        object.__setattr__(self, 'standard_deviations', MappingProxyType(
            {a: float(self.standard_deviations.get(a, 0.0)) for a in ATTRIBUTE_NAMES}))

    def mean(self, attribute: str) -> float:
        return self.means[attribute]

    def sd(self, attribute: str) -> float:
        return self.standard_deviations[attribute]

    def mean_vector(self) -> np.ndarray:
        """Means in ATTRIBUTE_NAMES order."""
        return np.array([self.means[a] for a in ATTRIBUTE_NAMES])

    def sd_vector(self) -> np.ndarray:
        """Standard deviations in ATTRIBUTE_NAMES order."""
        return np.array([self.standard_deviations[a] for a in ATTRIBUTE_NAMES])

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to DataFrame (one row per attribute)."""
        return pd.DataFrame({
            'attribute': list(ATTRIBUTE_NAMES),
            'mean': self.mean_vector(),
            'sd': self.sd_vector(),
        })


class CoefficientTable:
    """
    Country x severity table of mixed logit coefficients.

    Example:
        >>> table = CoefficientTable.from_dicts(MXL_MEANS, MXL_SDS)
        >>> table.get('AU', 'mild').mean('asc_mandate')
        0.464
    """

    def __init__(self, entries: Mapping[Tuple[Country, Severity], CoefficientSet]):
        self._entries = MappingProxyType(dict(entries))

    @classmethod
    def from_dicts(cls,
                   means: Dict[str, Dict[str, Dict[str, float]]],
                   sds: Optional[Dict[str, Dict[str, Dict[str, float]]]] = None) -> 'CoefficientTable':
        """
        Build a table from nested country -> severity -> attribute dicts.

        Raises:
            ValueError: If a country/severity code or coefficient set is invalid
        """
        sds = sds or {}
        entries = {}
        for country_code, by_severity in means.items():
            country = _parse_enum(Country, country_code)
            for severity_code, mean_values in by_severity.items():
                severity = _parse_enum(Severity, severity_code)
                sd_values = sds.get(country_code, {}).get(severity_code, {})
                entries[(country, severity)] = CoefficientSet(
                    country=country,
                    severity=severity,
                    means=mean_values,
                    standard_deviations=sd_values
                )
        return cls(entries)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'CoefficientTable':
        """
        Build a table from the "coefficients" section of a config file.

        Format: {country: {severity: {"means": {...}, "sds": {...}}}}
        """
        means = {}
        sds = {}
        for country_code, by_severity in config.items():
            for severity_code, entry in by_severity.items():
                if 'means' not in entry:
                    raise ValueError(f"coefficients.{country_code}.{severity_code}.means is required")
                means.setdefault(country_code, {})[severity_code] = entry['means']
                sds.setdefault(country_code, {})[severity_code] = entry.get('sds', {})
        return cls.from_dicts(means, sds)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'CoefficientTable':
        """Load a table from a JSON file in the from_config format."""
        with open(path) as f:
            return cls.from_config(json.load(f))

    def get(self,
            country: Union[Country, str, None],
            severity: Union[Severity, str, None]) -> Optional[CoefficientSet]:
        """
        Look up the coefficients for a country and severity.

        Returns:
            CoefficientSet, or None if either key is unknown or missing
        """
        try:
            key = (_parse_enum(Country, country), _parse_enum(Severity, severity))
        except ValueError:
            return None
        return self._entries.get(key)

    def keys(self) -> Iterator[Tuple[Country, Severity]]:
        return iter(self._entries.keys())

    def __contains__(self, key) -> bool:
        country, severity = key
        return self.get(country, severity) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def to_dataframe(self) -> pd.DataFrame:
        """Long-format table: country, severity, attribute, mean, sd."""
        frames = []
        for (country, severity), coefs in self._entries.items():
            df = coefs.to_dataframe()
            df.insert(0, 'severity', severity.value)
            df.insert(0, 'country', country.value)
            frames.append(df)
        if not frames:
            return pd.DataFrame(columns=['country', 'severity', 'attribute', 'mean', 'sd'])
        return pd.concat(frames, ignore_index=True)


_DEFAULT_TABLE: Optional[CoefficientTable] = None


def default_coefficient_table() -> CoefficientTable:
    """The published coefficient table, built once per process."""
    global _DEFAULT_TABLE
    if _DEFAULT_TABLE is None:
        _DEFAULT_TABLE = CoefficientTable.from_dicts(MXL_MEANS, MXL_SDS)
    return _DEFAULT_TABLE
