"""
Tests for Cost-Benefit Aggregation
==================================
"""

import pytest
import numpy as np
import pandas as pd

from mandate_dcm.config_schema import PolicyConfiguration
from mandate_dcm.policy_analysis.base import BenefitMetric, CostBreakdown, Settings
from mandate_dcm.policy_analysis.cost_benefit import (
    BCRLevel,
    CostBenefitAggregator,
    DataCompleteness,
    DerivedMetrics,
    SupportLevel,
    aggregate_metrics,
    classify_bcr,
    classify_status,
    classify_support,
    default_costs,
    metrics_delta,
)


class TestAggregateMetrics:
    """Tests for the pure aggregation step."""

    def test_au_mild_end_to_end_numbers(self, default_settings, au_mild_config,
                                        hundred_million_costs):
        """100 lives, 540M benefit, 100M cost, 440M net, BCR 5.4."""
        m = aggregate_metrics(default_settings, au_mild_config, hundred_million_costs, 0.6)
        assert np.isclose(m.lives_saved_total, 100.0)
        assert np.isclose(m.benefit_monetary, 5.4e8)
        assert m.cost_total == 1e8
        assert np.isclose(m.net_benefit, 4.4e8)
        assert np.isclose(m.bcr, 5.4)
        assert m.support_probability == 0.6

    def test_zero_cost(self, default_settings, au_mild_config):
        """Zero cost leaves BCR undefined and net equal to benefit."""
        m = aggregate_metrics(default_settings, au_mild_config, CostBreakdown(), 0.6)
        assert m.bcr is None
        assert m.cost_total == 0
        assert m.net_benefit == m.benefit_monetary

    def test_none_costs_treated_as_zero(self, default_settings, au_mild_config):
        """Missing costs are the same as all-zero costs."""
        a = aggregate_metrics(default_settings, au_mild_config, None, 0.5)
        b = aggregate_metrics(default_settings, au_mild_config, CostBreakdown(), 0.5)
        assert a == b

    def test_none_config(self, default_settings):
        """A missing configuration gives no result."""
        assert aggregate_metrics(default_settings, None, CostBreakdown(), 0.5) is None

    def test_support_passthrough_none(self, default_settings, au_mild_config):
        """Missing support does not block the monetary metrics."""
        m = aggregate_metrics(default_settings, au_mild_config, None, None)
        assert m.support_probability is None
        assert np.isclose(m.benefit_monetary, 5.4e8)

    def test_idempotent(self, default_settings, au_mild_config, hundred_million_costs):
        """Identical inputs give identical outputs."""
        a = aggregate_metrics(default_settings, au_mild_config, hundred_million_costs, 0.61)
        b = aggregate_metrics(default_settings, au_mild_config, hundred_million_costs, 0.61)
        assert a == b

    def test_zero_lives(self, default_settings, hundred_million_costs):
        """No lives saved means no benefit and negative net."""
        config = PolicyConfiguration(country='IT', outbreak_severity='mild')
        m = aggregate_metrics(default_settings, config, hundred_million_costs, 0.5)
        assert m.benefit_monetary == 0
        assert m.net_benefit == -1e8
        assert m.bcr == 0

    def test_str(self, default_settings, au_mild_config):
        """String form reports an undefined BCR."""
        m = aggregate_metrics(default_settings, au_mild_config, None, 0.5)
        assert 'not defined' in str(m)
        assert '50.0%' in str(m)


class TestCostBenefitAggregator:
    """Tests for the aggregator bound to a support estimator."""

    def test_uses_estimator(self, default_settings, au_mild_config):
        """Support comes from the bound estimator."""
        aggregator = CostBenefitAggregator(lambda config: 0.42)
        m = aggregator.compute(default_settings, au_mild_config)
        assert m.support_probability == 0.42

    def test_none_config_skips_estimator(self, default_settings):
        """The estimator is not called without a configuration."""
        calls = []
        aggregator = CostBenefitAggregator(lambda config: calls.append(config) or 0.5)
        assert aggregator.compute(default_settings, None) is None
        assert calls == []

    def test_compare(self, default_settings, au_mild_config, hundred_million_costs):
        """Comparison table is indexed by name."""
        aggregator = CostBenefitAggregator(lambda config: 0.5)
        df = aggregator.compare(default_settings, {
            'low': au_mild_config,
            'high': au_mild_config.with_changes(lives_saved_per_100k=20),
        }, hundred_million_costs)
        assert isinstance(df, pd.DataFrame)
        assert list(df.index) == ['low', 'high']
        assert np.isclose(df.loc['high', 'bcr'], 10.8)

    def test_compare_rejects_unset_configuration(self, default_settings, au_mild_config):
        aggregator = CostBenefitAggregator(lambda config: 0.5)
        with pytest.raises(ValueError, match="draft"):
            aggregator.compare(default_settings, {'current': au_mild_config, 'draft': None})


class TestDefaultCosts:
    """Tests for stylised default costs."""

    def test_au_mild(self, default_settings, au_mild_config):
        """AU mild: per-million defaults times 0.8."""
        costs = default_costs(default_settings, au_mild_config)
        assert costs.it_systems == 960000
        assert costs.enforcement == 1440000
        assert np.isclose(costs.total, 5840000)

    def test_severe_multiplier_and_scaling(self):
        """Severe outbreaks scale by 1.3; population and horizon scale linearly."""
        settings = Settings(population=2500000, horizon_years=2)
        config = PolicyConfiguration(country='FR', outbreak_severity='severe')
        costs = default_costs(settings, config)
        assert costs.it_systems == round(1000000 * 2.5 * 2 * 1.3)

    def test_rounded_to_whole_units(self):
        """Components are whole currency units."""
        settings = Settings(population=333333)
        config = PolicyConfiguration(country='IT', outbreak_severity='mild')
        for value in default_costs(settings, config).to_dict().values():
            assert value == int(value)

    def test_none_config(self, default_settings):
        assert default_costs(default_settings, None) is None


class TestStatusClassification:
    """Tests for support, BCR and data-completeness bands."""

    @pytest.mark.parametrize("support,expected", [
        (0.0, SupportLevel.LOW),
        (0.499, SupportLevel.LOW),
        (0.5, SupportLevel.MEDIUM),
        (0.699, SupportLevel.MEDIUM),
        (0.7, SupportLevel.HIGH),
        (1.0, SupportLevel.HIGH),
        (None, SupportLevel.UNKNOWN),
    ])
    def test_support_bands(self, support, expected):
        assert classify_support(support) is expected

    @pytest.mark.parametrize("bcr,expected", [
        (None, BCRLevel.NOT_DEFINED),
        (0.5, BCRLevel.UNFAVOURABLE),
        (0.8, BCRLevel.UNCERTAIN),
        (0.99, BCRLevel.UNCERTAIN),
        (1.0, BCRLevel.FAVOURABLE),
        (5.4, BCRLevel.FAVOURABLE),
    ])
    def test_bcr_bands(self, bcr, expected):
        assert classify_bcr(bcr) is expected

    def test_data_completeness(self, au_mild_config, hundred_million_costs):
        """Completeness reflects whether costs and valuation are present."""
        valued = Settings(valuation_per_unit=5.4e6)
        unvalued = Settings(valuation_per_unit=0)

        m = aggregate_metrics(valued, au_mild_config, hundred_million_costs, 0.6)
        assert classify_status(valued, m).data is DataCompleteness.COMPLETE

        m = aggregate_metrics(valued, au_mild_config, None, 0.6)
        assert classify_status(valued, m).data is DataCompleteness.COSTS_MISSING

        m = aggregate_metrics(unvalued, au_mild_config, hundred_million_costs, 0.6)
        assert classify_status(unvalued, m).data is DataCompleteness.BENEFIT_MISSING

        m = aggregate_metrics(unvalued, au_mild_config, None, 0.6)
        status = classify_status(unvalued, m)
        assert status.data is DataCompleteness.INCOMPLETE
        assert status.bcr is BCRLevel.NOT_DEFINED
        assert status.support is SupportLevel.MEDIUM


class TestMetricsDelta:
    """Tests for what changed between evaluations."""

    def test_delta(self):
        before = DerivedMetrics(0.50, 100.0, 5.4e8, 1e8, 4.4e8, 5.4)
        after = DerivedMetrics(0.55, 150.0, 8.1e8, 2e8, 6.1e8, 4.05)
        delta = metrics_delta(before, after)
        assert np.isclose(delta.support_pp, 5.0)
        assert np.isclose(delta.bcr, -1.35)
        assert delta.lives_saved == 50.0
        assert delta.cost == 1e8

    def test_undefined_bcr(self):
        """BCR change is undefined if either side lacks a BCR."""
        before = DerivedMetrics(0.5, 100.0, 5.4e8, 0.0, 5.4e8, None)
        after = DerivedMetrics(0.5, 100.0, 5.4e8, 1e8, 4.4e8, 5.4)
        assert metrics_delta(before, after).bcr is None
        assert '–' in str(metrics_delta(before, after))

    def test_missing_side(self):
        after = DerivedMetrics(0.5, 100.0, 5.4e8, 1e8, 4.4e8, 5.4)
        assert metrics_delta(None, after) is None


class TestSettingsAndCosts:
    """Tests for value objects feeding the aggregator."""

    def test_negative_population_rejected(self):
        with pytest.raises(ValueError):
            Settings(population=-1)

    def test_non_finite_valuation_rejected(self):
        with pytest.raises(ValueError):
            Settings(valuation_per_unit=float('inf'))

    def test_zero_horizon_rejected(self):
        with pytest.raises(ValueError):
            Settings(horizon_years=0)

    def test_for_country(self):
        """Country defaults fill valuation and currency."""
        settings = Settings.for_country('FR', population=2e6)
        assert settings.valuation_per_unit == 3000000
        assert settings.currency_label == 'EUR'
        assert settings.population == 2e6

        vsly = Settings.for_country('AU', benefit_metric='vsly')
        assert vsly.benefit_metric is BenefitMetric.VSLY
        assert vsly.valuation_per_unit == 230000

    def test_negative_cost_rejected(self):
        with pytest.raises(ValueError):
            CostBreakdown(admin=-5)

    def test_from_dict(self):
        """Unset or None components become zero; unknown names are rejected."""
        costs = CostBreakdown.from_dict({'admin': 10, 'other': None})
        assert costs.total == 10
        with pytest.raises(ValueError):
            CostBreakdown.from_dict({'vaccines': 10})

    def test_largest_component(self):
        """Largest component wins; ties go to the first listed."""
        assert CostBreakdown().largest_component() is None
        assert CostBreakdown(admin=5, other=9).largest_component() == 'other'
        assert CostBreakdown(it_systems=7, enforcement=7).largest_component() == 'it_systems'


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
