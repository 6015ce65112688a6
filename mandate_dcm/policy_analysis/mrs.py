"""
Lives-Saved Equivalents (Marginal Rate of Substitution)
=======================================================

Translate categorical mandate design changes into "lives saved per 100,000"
equivalents, using the ratio of mean coefficients.

Key Formula:
    MRS_attribute = -β_attribute / β_lives

Sign convention:
    MRS > 0  the change is as unattractive as losing MRS lives saved per
             100,000 (less preferred)
    MRS < 0  the change is as attractive as gaining |MRS| lives saved per
             100,000 (more preferred)

The numerator is negated, never the slope. If β_lives is zero or missing the
MRS is undefined and no rows are returned.

Author: Mandate DCM Team
"""

import numpy as np
import pandas as pd
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ..config_schema import (
    Country,
    CoverageThreshold,
    ExemptionPolicy,
    PolicyConfiguration,
    Scope,
    Severity,
)
from ..models.coefficients import CoefficientSet, CoefficientTable


class Direction(Enum):
    """Whether a design change makes the mandate more or less attractive."""
    MORE_PREFERRED = "more preferred"
    LESS_PREFERRED = "less preferred"


# Design changes in display order: scope, exemptions, coverage.
# (config field, non-reference level, coefficient, label)
MRS_ATTRIBUTES: List[Tuple[str, object, str, str]] = [
    ('scope', Scope.ALL, 'scope_all',
     'Scope: high-risk occupations → all occupations & public spaces'),
    ('exemptions', ExemptionPolicy.MEDICAL_RELIGIOUS, 'exemption_medrel',
     'Exemptions: medical only → medical + religious'),
    ('exemptions', ExemptionPolicy.MEDICAL_RELIGIOUS_PERSONAL, 'exemption_medrelpers',
     'Exemptions: medical only → medical + religious + personal belief'),
    ('coverage_threshold', CoverageThreshold.PCT_70, 'coverage_70',
     'Coverage threshold: 50% → 70% vaccinated'),
    ('coverage_threshold', CoverageThreshold.PCT_90, 'coverage_90',
     'Coverage threshold: 50% → 90% vaccinated'),
]


@dataclass
class MRSRow:
    """
    Lives-saved equivalent of one design change.

    Attributes:
        attribute: Coefficient name of the changed attribute
        attribute_label: Human-readable description of the change
        value: Lives saved per 100k equivalent (signed)
        direction: More or less preferred than the reference level
    """
    attribute: str
    attribute_label: str
    value: float
    direction: Direction

    def __str__(self) -> str:
        return f"{self.attribute_label}: {self.value:+.1f} ({self.direction.value})"


def mrs_value(coefs: CoefficientSet, attribute: str) -> Optional[float]:
    """
    MRS of an attribute against lives saved.

    Returns:
        -β_attribute / β_lives, or None if the slope is zero
    """
    beta_lives = coefs.mean('lives_saved')
    if beta_lives == 0:
        return None
    return -coefs.mean(attribute) / beta_lives


def _make_row(coefs: CoefficientSet, attribute: str, label: str) -> Optional[MRSRow]:
    value = mrs_value(coefs, attribute)
    if value is None:
        return None
    direction = Direction.LESS_PREFERRED if value >= 0 else Direction.MORE_PREFERRED
    return MRSRow(attribute=attribute, attribute_label=label,
                  value=value, direction=direction)


class MRSCalculator:
    """
    Lives-saved equivalents for mandate design changes.

    Uses mean coefficients (not simulated draws) for the configuration's
    country and severity.

    Example:
        >>> calc = MRSCalculator(default_coefficient_table())
        >>> rows = calc.compute(config)
        >>> rows[0].value
        -2.405...
    """

    def __init__(self, table: CoefficientTable, max_rows: Optional[int] = None):
        """
        Initialize MRS calculator.

        Args:
            table: Coefficient table
            max_rows: Truncate results to this many rows (None keeps all)
        """
        self.table = table
        self.max_rows = max_rows

    def compute(self, config: Optional[PolicyConfiguration]) -> List[MRSRow]:
        """
        MRS rows for every attribute at a non-reference level.

        Rows follow the fixed order scope, exemptions, coverage.

        Returns:
            List of MRSRow; empty if the configuration is missing, its
            coefficients are unavailable, or the lives-saved slope is zero
        """
        if config is None:
            return []
        coefs = self.table.get(config.country, config.outbreak_severity)
        if coefs is None or coefs.mean('lives_saved') == 0:
            return []

        rows = []
        for field_name, level, attribute, label in MRS_ATTRIBUTES:
            if getattr(config, field_name) is level:
                rows.append(_make_row(coefs, attribute, label))

        if self.max_rows is not None:
            rows = rows[:self.max_rows]
        return rows

    def full_mrs_table(self,
                       country: Country,
                       severity: Severity) -> pd.DataFrame:
        """
        MRS of every non-reference level, regardless of configuration.

        Returns:
            DataFrame with columns attribute, label, mrs, direction
            (empty if the coefficients or slope are unavailable)
        """
        columns = ['attribute', 'label', 'mrs', 'direction']
        coefs = self.table.get(country, severity)
        if coefs is None or coefs.mean('lives_saved') == 0:
            return pd.DataFrame(columns=columns)

        records = []
        for _, _, attribute, label in MRS_ATTRIBUTES:
            row = _make_row(coefs, attribute, label)
            records.append({
                'attribute': row.attribute,
                'label': row.attribute_label,
                'mrs': row.value,
                'direction': row.direction.value
            })
        return pd.DataFrame(records, columns=columns)

    def to_dataframe(self, config: Optional[PolicyConfiguration]) -> pd.DataFrame:
        """MRS rows for a configuration as a DataFrame."""
        rows = self.compute(config)
        return pd.DataFrame({
            'attribute': [r.attribute for r in rows],
            'label': [r.attribute_label for r in rows],
            'mrs': np.array([r.value for r in rows], dtype=float),
            'direction': [r.direction.value for r in rows]
        })
