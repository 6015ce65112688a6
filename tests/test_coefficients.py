"""
Tests for Coefficient Tables
============================
"""

import json

import pytest
import numpy as np

from mandate_dcm.config_schema import Country, Severity
from mandate_dcm.constants import ATTRIBUTE_NAMES, MXL_MEANS, MXL_SDS
from mandate_dcm.models.coefficients import (
    CoefficientSet,
    CoefficientTable,
    default_coefficient_table,
)


class TestDefaultTable:
    """Tests for the published coefficient table."""

    def test_all_entries_present(self, coefficient_table):
        """Three countries by two severities."""
        assert len(coefficient_table) == 6
        for country in Country:
            for severity in Severity:
                assert (country, severity) in coefficient_table

    def test_known_values(self, coefficient_table):
        """Spot-check published values."""
        au_severe = coefficient_table.get(Country.AU, Severity.SEVERE)
        assert au_severe.mean('scope_all') == 0.190
        assert au_severe.mean('lives_saved') == 0.079
        assert au_severe.sd('asc_optout') == 5.021

        fr_mild = coefficient_table.get('FR', 'mild')
        assert fr_mild.mean('asc_optout') == 0.307

    def test_string_lookup(self, coefficient_table):
        """Lookup accepts codes as strings, case-insensitively."""
        assert coefficient_table.get('it', 'SEVERE') is coefficient_table.get(Country.IT, Severity.SEVERE)

    def test_unknown_lookup_returns_none(self, coefficient_table):
        """Unknown or missing keys give None instead of raising."""
        assert coefficient_table.get('DE', 'mild') is None
        assert coefficient_table.get('AU', 'moderate') is None
        assert coefficient_table.get(None, 'mild') is None

    def test_cached(self):
        """The default table is built once."""
        assert default_coefficient_table() is default_coefficient_table()

    def test_vectors_follow_attribute_order(self, coefficient_table):
        """Mean and SD vectors are in ATTRIBUTE_NAMES order."""
        coefs = coefficient_table.get('IT', 'mild')
        expected_means = [MXL_MEANS['IT']['mild'][a] for a in ATTRIBUTE_NAMES]
        expected_sds = [MXL_SDS['IT']['mild'][a] for a in ATTRIBUTE_NAMES]
        np.testing.assert_array_equal(coefs.mean_vector(), expected_means)
        np.testing.assert_array_equal(coefs.sd_vector(), expected_sds)

    def test_long_dataframe(self, coefficient_table):
        """Long format has one row per country, severity and attribute."""
        df = coefficient_table.to_dataframe()
        assert len(df) == 6 * len(ATTRIBUTE_NAMES)
        assert list(df.columns) == ['country', 'severity', 'attribute', 'mean', 'sd']


class TestCoefficientSetValidation:
    """Tests for load-time validation."""

    def test_missing_mean_rejected(self):
        """All eight means are required."""
        means = dict(MXL_MEANS['AU']['mild'])
        del means['coverage_90']
        with pytest.raises(ValueError, match='missing'):
            CoefficientSet(Country.AU, Severity.MILD, means, {})

    def test_unknown_attribute_rejected(self):
        """Extra attributes are rejected."""
        means = dict(MXL_MEANS['AU']['mild'], price=-0.1)
        with pytest.raises(ValueError, match='unknown'):
            CoefficientSet(Country.AU, Severity.MILD, means, {})

    def test_negative_sd_rejected(self):
        """Standard deviations must be non-negative."""
        with pytest.raises(ValueError, match='negative'):
            CoefficientSet(Country.AU, Severity.MILD, MXL_MEANS['AU']['mild'],
                           {'scope_all': -0.5})

    def test_non_finite_rejected(self):
        """NaN coefficients are rejected."""
        means = dict(MXL_MEANS['AU']['mild'], lives_saved=float('nan'))
        with pytest.raises(ValueError, match='not finite'):
            CoefficientSet(Country.AU, Severity.MILD, means, {})

    @pytest.mark.parametrize("value", ['abc', None, [0.1], True])
    def test_non_numeric_rejected(self, value):
        """Values that are not numbers raise ValueError, not TypeError."""
        means = dict(MXL_MEANS['AU']['mild'], lives_saved=value)
        with pytest.raises(ValueError, match='not a number'):
            CoefficientSet(Country.AU, Severity.MILD, means, {})
        with pytest.raises(ValueError, match='not a number'):
            CoefficientSet(Country.AU, Severity.MILD, MXL_MEANS['AU']['mild'],
                           {'scope_all': value})

    def test_numeric_strings_coerced(self):
        means = {a: str(v) for a, v in MXL_MEANS['AU']['mild'].items()}
        coefs = CoefficientSet(Country.AU, Severity.MILD, means, {})
        assert coefs.mean('lives_saved') == MXL_MEANS['AU']['mild']['lives_saved']

    def test_missing_sds_are_zero(self):
        """Absent SDs mean a fixed coefficient."""
        coefs = CoefficientSet(Country.AU, Severity.MILD, MXL_MEANS['AU']['mild'],
                               {'asc_mandate': 1.0})
        assert coefs.sd('asc_mandate') == 1.0
        assert coefs.sd('lives_saved') == 0.0

    def test_immutable(self, coefficient_table):
        """Coefficient mappings cannot be mutated."""
        coefs = coefficient_table.get('AU', 'mild')
        with pytest.raises(TypeError):
            coefs.means['asc_mandate'] = 10.0


class TestTableLoading:
    """Tests for building tables from config data."""

    def test_from_config(self):
        """Config section format builds a table."""
        table = CoefficientTable.from_config({
            'FR': {'mild': {'means': MXL_MEANS['FR']['mild'],
                            'sds': MXL_SDS['FR']['mild']}}
        })
        assert len(table) == 1
        assert table.get('FR', 'mild').sd('scope_all') == 1.258
        assert table.get('FR', 'severe') is None

    def test_from_config_requires_means(self):
        """Each entry needs a means block."""
        with pytest.raises(ValueError, match='means'):
            CoefficientTable.from_config({'FR': {'mild': {'sds': {}}}})

    def test_from_dicts_rejects_unknown_country(self):
        """Unknown country codes fail at load time."""
        with pytest.raises(ValueError):
            CoefficientTable.from_dicts({'DE': {'mild': MXL_MEANS['AU']['mild']}})

    def test_from_json(self, tmp_path):
        """Tables load from JSON files."""
        path = tmp_path / 'coefs.json'
        path.write_text(json.dumps({
            'IT': {'severe': {'means': MXL_MEANS['IT']['severe']}}
        }))
        table = CoefficientTable.from_json(path)
        assert table.get('IT', 'severe').mean('coverage_90') == 0.515


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
