"""
Scenario Comparison
===================

Keep snapshots of evaluated mandate designs and compare them side by side.

Key Capabilities:
- Save the current settings, configuration, costs and metrics as a scenario
- Pin scenarios of interest for a shortlist
- Tabulate and rank scenarios by any derived metric

Scenarios live in memory only.

Author: Mandate DCM Team
"""

import pandas as pd
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..config_schema import PolicyConfiguration
from .base import CostBreakdown, Settings
from .cost_benefit import DerivedMetrics, classify_bcr, classify_support

RANKABLE_METRICS = [
    'support_probability',
    'lives_saved_total',
    'benefit_monetary',
    'cost_total',
    'net_benefit',
    'bcr',
]


@dataclass
class Scenario:
    """
    Snapshot of one evaluated design.

    Attributes:
        scenario_id: Sequential identifier (starts at 1)
        timestamp: UTC time the scenario was saved
        settings: Settings used
        config: Policy configuration
        costs: Cost breakdown (None if not entered)
        metrics: Derived metrics at save time
        pinned: Whether the scenario is on the shortlist
        notes: Free-text notes
    """
    scenario_id: int
    timestamp: datetime
    settings: Settings
    config: PolicyConfiguration
    costs: Optional[CostBreakdown]
    metrics: DerivedMetrics
    pinned: bool = False
    notes: str = ''

    def to_record(self) -> Dict[str, object]:
        """Flat record for tabulation."""
        record = {
            'scenario_id': self.scenario_id,
            'timestamp': self.timestamp.isoformat(),
            'pinned': self.pinned,
        }
        record.update(self.config.to_dict())
        record['population'] = self.settings.population
        record['valuation_per_unit'] = self.settings.valuation_per_unit
        record['currency_label'] = self.settings.currency_label
        record.update(self.metrics.to_dict())
        record['support_level'] = classify_support(self.metrics.support_probability).value
        record['bcr_level'] = classify_bcr(self.metrics.bcr).value
        record['notes'] = self.notes
        return record


class ScenarioSet:
    """
    In-memory collection of saved scenarios.

    Example:
        >>> scenarios = ScenarioSet()
        >>> s = scenarios.save(settings, config, costs, metrics)
        >>> scenarios.pin(s.scenario_id)
        >>> scenarios.to_dataframe(rank_by='bcr')
    """

    def __init__(self):
        self._scenarios: List[Scenario] = []

    def __len__(self) -> int:
        return len(self._scenarios)

    def __iter__(self):
        return iter(self._scenarios)

    def _next_id(self) -> int:
        if not self._scenarios:
            return 1
        return max(s.scenario_id for s in self._scenarios) + 1

    def save(self,
             settings: Settings,
             config: Optional[PolicyConfiguration],
             costs: Optional[CostBreakdown],
             metrics: Optional[DerivedMetrics],
             notes: str = '') -> Scenario:
        """
        Save a scenario snapshot.

        Raises:
            ValueError: If no configuration has been applied or no metrics exist
        """
        if config is None or metrics is None:
            raise ValueError("Apply a configuration before saving a scenario")

        scenario = Scenario(
            scenario_id=self._next_id(),
            timestamp=datetime.now(timezone.utc),
            settings=settings,
            config=config,
            costs=costs,
            metrics=metrics,
            notes=notes
        )
        self._scenarios.append(scenario)
        return scenario

    def get(self, scenario_id: int) -> Scenario:
        for s in self._scenarios:
            if s.scenario_id == scenario_id:
                return s
        raise KeyError(f"Scenario {scenario_id} not found")

    def remove(self, scenario_id: int) -> None:
        self._scenarios.remove(self.get(scenario_id))

    def pin(self, scenario_id: int, pinned: bool = True) -> Scenario:
        scenario = self.get(scenario_id)
        scenario.pinned = pinned
        return scenario

    def toggle_pin(self, scenario_id: int) -> Scenario:
        scenario = self.get(scenario_id)
        scenario.pinned = not scenario.pinned
        return scenario

    def pinned(self) -> List[Scenario]:
        return [s for s in self._scenarios if s.pinned]

    def to_dataframe(self,
                     rank_by: Optional[str] = None,
                     ascending: bool = False,
                     pinned_only: bool = False) -> pd.DataFrame:
        """
        Tabulate scenarios.

        Args:
            rank_by: Metric to sort by (see RANKABLE_METRICS); None keeps
                save order. Undefined values sort last.
            ascending: Sort direction
            pinned_only: Only include pinned scenarios

        Returns:
            DataFrame with one row per scenario
        """
        if rank_by is not None and rank_by not in RANKABLE_METRICS:
            raise ValueError(f"Cannot rank by {rank_by!r}; expected one of {RANKABLE_METRICS}")

        scenarios = self.pinned() if pinned_only else self._scenarios
        df = pd.DataFrame([s.to_record() for s in scenarios])
        if df.empty or rank_by is None:
            return df

        return df.sort_values(rank_by, ascending=ascending,
                              na_position='last', kind='mergesort').reset_index(drop=True)
