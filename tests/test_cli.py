"""
Tests for the Command Line Entry Point
======================================
"""

import json
import logging

import pytest
import numpy as np

from mandate_dcm.cli import EXIT_INVALID_INPUT, main
from mandate_dcm.constants import MXL_MEANS


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def run_json(capsys, argv):
    code = main(argv + ['--json', '--draws', '200'])
    assert code == 0
    return json.loads(capsys.readouterr().out)


class TestCLI:
    """Tests for mandate-dcm."""

    def test_json_au_mild(self, capsys):
        """AU/mild with 10 lives and 100M cost gives BCR 5.4."""
        report = run_json(capsys, ['--country', 'AU', '--severity', 'mild',
                                   '--lives', '10', '--enforcement', '1e8'])
        metrics = report['metrics']
        assert 0.0 < metrics['support_probability'] < 1.0
        assert np.isclose(metrics['lives_saved_total'], 100.0)
        assert np.isclose(metrics['bcr'], 5.4)
        assert report['settings']['currency_label'] == 'AUD'
        assert report['status']['bcr'] == 'favourable'
        assert report['mrs'] == []

    def test_default_costs(self, capsys):
        report = run_json(capsys, ['--country', 'AU', '--severity', 'mild',
                                   '--default-costs', '--admin', '5'])
        assert report['costs']['it_systems'] == 960000
        assert report['costs']['admin'] == 5

    def test_zero_cost_bcr_undefined(self, capsys):
        report = run_json(capsys, ['--country', 'IT', '--severity', 'severe', '--lives', '3'])
        assert report['metrics']['bcr'] is None
        assert report['costs'] is None
        assert report['status']['bcr'] == 'not defined'

    def test_mrs_rows(self, capsys):
        report = run_json(capsys, ['--country', 'AU', '--severity', 'severe', '--scope', 'all'])
        assert len(report['mrs']) == 1
        assert np.isclose(report['mrs'][0]['value'], -2.405, atol=1e-3)
        assert report['mrs'][0]['direction'] == 'more preferred'

    def test_config_file_with_override(self, capsys, policy_config_file):
        """Flags override values read from --config."""
        report = run_json(capsys, ['--config', str(policy_config_file), '--lives', '40'])
        assert report['configuration']['country'] == 'FR'
        assert report['configuration']['coverage_threshold'] == 0.7
        assert report['configuration']['lives_saved_per_100k'] == 40.0

    def test_valuation_and_currency_override(self, capsys):
        report = run_json(capsys, ['--country', 'FR', '--severity', 'mild', '--lives', '1',
                                   '--valuation', '1e6', '--currency', 'EUR (2024)'])
        assert report['settings']['valuation_per_unit'] == 1e6
        assert report['settings']['currency_label'] == 'EUR (2024)'

    def test_text_report(self, capsys):
        code = main(['--country', 'AU', '--severity', 'severe', '--scope', 'all',
                     '--lives', '10', '--default-costs', '--draws', '100'])
        out = capsys.readouterr().out
        assert code == 0
        assert 'MANDATE EVALUATION' in out
        assert 'Lives-saved equivalents' in out
        assert 'Largest cost' in out

    @pytest.mark.parametrize("argv", [
        ['--country', 'DE', '--severity', 'mild'],
        ['--country', 'AU'],
        ['--country', 'AU', '--severity', 'mild', '--coverage', '60'],
        ['--country', 'AU', '--severity', 'mild', '--population', '-5'],
        ['--country', 'AU', '--severity', 'mild', '--admin', '-1'],
        ['--country', 'AU', '--severity', 'mild', '--draws', '0'],
    ])
    def test_invalid_input(self, capsys, argv):
        assert main(argv) == EXIT_INVALID_INPUT
        assert 'error' in capsys.readouterr().err

    def test_missing_config_file(self, capsys, tmp_path):
        assert main(['--config', str(tmp_path / 'missing.json')]) == EXIT_INVALID_INPUT

    def test_config_file_not_an_object(self, capsys, tmp_path):
        """A JSON list is rejected rather than merged into the configuration."""
        path = tmp_path / 'policy.json'
        path.write_text(json.dumps([1, 2]))
        code = main(['--config', str(path), '--country', 'AU', '--severity', 'mild'])
        assert code == EXIT_INVALID_INPUT
        assert 'expected a JSON object' in capsys.readouterr().err

    @pytest.mark.parametrize("content", [
        {'simulation': {'seed': 1.5}},
        {'simulation': {'seed': 'abc'}},
        {'coefficients': {'AU': {'mild': {
            'means': dict(MXL_MEANS['AU']['mild'], lives_saved='abc')}}}},
    ])
    def test_invalid_calculator_config(self, capsys, tmp_path, content):
        path = tmp_path / 'calculator.json'
        path.write_text(json.dumps(content))
        code = main(['--country', 'AU', '--severity', 'mild',
                     '--calculator-config', str(path)])
        assert code == EXIT_INVALID_INPUT
        assert 'error' in capsys.readouterr().err


class TestLogOutput:
    """Tests for --log-format and --log-file."""

    def test_json_log_lines(self, capsys):
        code = main(['--country', 'AU', '--severity', 'mild', '--lives', '10',
                     '--draws', '50', '--log-level', 'INFO', '--log-format', 'json'])
        assert code == 0
        lines = [line for line in capsys.readouterr().err.splitlines() if line.strip()]
        records = [json.loads(line) for line in lines]
        evaluated = [r for r in records if r['message'].startswith('Evaluated: AU/mild')]
        assert len(evaluated) == 1
        assert 0.0 < evaluated[0]['data']['support'] < 1.0

    def test_log_file(self, capsys, tmp_path):
        log_file = tmp_path / 'evaluation.log'
        main(['--country', 'AU', '--severity', 'mild', '--draws', '50',
              '--log-level', 'INFO', '--log-file', str(log_file)])
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert 'Evaluating: AU/mild' in log_file.read_text()

    def test_unknown_log_format(self, capsys):
        with pytest.raises(SystemExit):
            main(['--country', 'AU', '--severity', 'mild', '--log-format', 'xml'])


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
