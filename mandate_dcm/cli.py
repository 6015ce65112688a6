"""
Mandate Calculator Command Line
===============================

Evaluate one mandate configuration and print support, lives-saved
equivalents, cost-benefit metrics and status.

Usage:
    mandate-dcm --country AU --severity mild --lives 10 --default-costs
    mandate-dcm --config policy.json --population 5000000 --json
    python -m mandate_dcm.cli --country FR --severity severe --scope all \\
        --exemptions medrel --coverage 70 --lives 25 --enforcement 1.5e6

Configuration values given on the command line override those read from
--config. Exit code 2 signals invalid input.
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import Any, Dict, List, Optional

from .config_schema import (
    REQUIRED_FIELDS,
    ConfigurationError,
    PolicyConfiguration,
)
from .constants import COST_COMPONENT_LABELS, N_DRAWS_DEFAULT, RANDOM_SEED
from .policy_analysis.base import BenefitMetric, CalculatorConfig, CostBreakdown, Settings
from .policy_analysis.calculator import PolicyCalculator
from .policy_analysis.cost_benefit import classify_status
from .utils.logging_config import FORMATS, EvaluationLogger, get_logger, setup_logging

logger = get_logger(__name__)

EXIT_INVALID_INPUT = 2

# Command-line flag -> configuration field
CONFIG_FLAGS = {
    'country': 'country',
    'severity': 'outbreak_severity',
    'scope': 'scope',
    'exemptions': 'exemptions',
    'coverage': 'coverage_threshold',
    'lives': 'lives_saved_per_100k',
}

CONFIG_DEFAULTS = {
    'scope': 'highrisk',
    'exemptions': 'medical',
    'coverage_threshold': 0.5,
    'lives_saved_per_100k': 0.0,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='mandate-dcm',
        description='Evaluate a vaccine mandate design with the mixed logit policy calculator'
    )

    design = parser.add_argument_group('mandate design')
    design.add_argument('--config', type=str, default=None,
                        help='JSON file with the policy configuration')
    design.add_argument('--country', type=str, default=None,
                        help='Country code: AU, IT or FR')
    design.add_argument('--severity', type=str, default=None,
                        help='Outbreak severity: mild or severe')
    design.add_argument('--scope', type=str, default=None,
                        help='Mandate scope: highrisk or all (default: highrisk)')
    design.add_argument('--exemptions', type=str, default=None,
                        help='Exemptions: medical, medrel or medrelpers (default: medical)')
    design.add_argument('--coverage', type=float, default=None,
                        help='Coverage threshold as fraction or percent: 50, 70 or 90 (default: 50)')
    design.add_argument('--lives', type=float, default=None,
                        help='Expected lives saved per 100,000 people (default: 0)')

    settings = parser.add_argument_group('settings')
    settings.add_argument('--population', type=float, default=1000000.0,
                          help='Population covered (default: 1,000,000)')
    settings.add_argument('--metric', type=str, default=BenefitMetric.VSL.value,
                          choices=[m.value for m in BenefitMetric],
                          help='Benefit metric (default: vsl)')
    settings.add_argument('--valuation', type=float, default=None,
                          help='Value per life saved (default: country value for --metric)')
    settings.add_argument('--horizon', type=float, default=1.0,
                          help='Evaluation horizon in years (default: 1)')
    settings.add_argument('--currency', type=str, default=None,
                          help='Currency label (default: inferred from country)')

    costs = parser.add_argument_group('implementation costs')
    for name, label in COST_COMPONENT_LABELS.items():
        costs.add_argument(f"--{name.replace('_', '-')}", dest=name, type=float, default=None,
                           help=label)
    costs.add_argument('--default-costs', action='store_true',
                       help='Fill unset cost components with stylised country defaults')

    sim = parser.add_argument_group('simulation')
    sim.add_argument('--calculator-config', type=str, default=None,
                     help='JSON file with simulation/mrs/coefficients sections')
    sim.add_argument('--seed', type=int, default=None,
                     help=f'Seed of the draw panel (default: {RANDOM_SEED})')
    sim.add_argument('--draws', type=int, default=None,
                     help=f'Number of Monte Carlo draws (default: {N_DRAWS_DEFAULT})')

    out = parser.add_argument_group('output')
    out.add_argument('--json', action='store_true',
                     help='Print results as JSON')
    out.add_argument('--log-level', type=str, default='WARNING',
                     choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                     help='Logging level (default: WARNING)')
    out.add_argument('--log-format', type=str, default='standard',
                     choices=sorted(FORMATS),
                     help='Log line format (default: standard)')
    out.add_argument('--log-file', type=str, default=None,
                     help='Also write log records to this file')

    return parser


def _resolve_config(args: argparse.Namespace) -> PolicyConfiguration:
    raw: Dict[str, Any] = dict(CONFIG_DEFAULTS)
    if args.config:
        with open(args.config) as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ConfigurationError([
                f"{args.config}: expected a JSON object, got {type(loaded).__name__}"
            ])
        raw.update(loaded)

    for flag, key in CONFIG_FLAGS.items():
        value = getattr(args, flag)
        if value is not None:
            raw[key] = value

    return PolicyConfiguration.from_dict({k: raw.get(k) for k in REQUIRED_FIELDS})


def _resolve_settings(args: argparse.Namespace, config: PolicyConfiguration) -> Settings:
    settings = Settings.for_country(
        config.country,
        population=args.population,
        benefit_metric=args.metric,
        horizon_years=args.horizon
    )
    overrides = {}
    if args.valuation is not None:
        overrides['valuation_per_unit'] = args.valuation
    if args.currency is not None:
        overrides['currency_label'] = args.currency
    return replace(settings, **overrides)


def _resolve_costs(args: argparse.Namespace,
                   calc: PolicyCalculator,
                   settings: Settings,
                   config: PolicyConfiguration) -> Optional[CostBreakdown]:
    entered = {name: getattr(args, name) for name in COST_COMPONENT_LABELS
               if getattr(args, name) is not None}
    if args.default_costs:
        values = calc.default_costs(settings, config).to_dict()
        values.update(entered)
        return CostBreakdown.from_dict(values)
    if entered:
        return CostBreakdown.from_dict(entered)
    return None


def _resolve_calculator_config(args: argparse.Namespace) -> CalculatorConfig:
    if args.calculator_config:
        base = CalculatorConfig.from_config_json(args.calculator_config)
    else:
        base = CalculatorConfig()
    return CalculatorConfig(
        seed=args.seed if args.seed is not None else base.seed,
        n_draws=args.draws if args.draws is not None else base.n_draws,
        max_mrs_rows=base.max_mrs_rows,
        coefficients=base.coefficients
    )


def print_report(config: PolicyConfiguration,
                 settings: Settings,
                 costs: Optional[CostBreakdown],
                 metrics,
                 mrs_rows) -> None:
    """Print a human-readable evaluation summary."""
    cur = settings.currency_label
    print("=" * 70)
    print(f"MANDATE EVALUATION: {config.country.label}, {config.outbreak_severity.label}")
    print("=" * 70)
    print(f"  Scope:       {config.scope.label}")
    print(f"  Exemptions:  {config.exemptions.label}")
    print(f"  Coverage:    {config.coverage_threshold.label}")
    print(f"  Lives saved: {config.lives_saved_per_100k:g} per 100,000")

    print("\nResults:")
    support = metrics.support_probability
    print(f"  Support:          {'n/a' if support is None else f'{support:.1%}'}")
    print(f"  Lives saved:      {metrics.lives_saved_total:,.1f}")
    print(f"  Benefit:          {metrics.benefit_monetary:,.0f} {cur}")
    print(f"  Cost:             {metrics.cost_total:,.0f} {cur}")
    print(f"  Net benefit:      {metrics.net_benefit:,.0f} {cur}")
    print(f"  BCR:              {'not defined' if metrics.bcr is None else f'{metrics.bcr:.2f}'}")

    if costs is not None and costs.largest_component() is not None:
        print(f"  Largest cost:     {COST_COMPONENT_LABELS[costs.largest_component()]}")

    if mrs_rows:
        print("\nLives-saved equivalents (per 100,000):")
        for row in mrs_rows:
            print(f"  {row}")

    status = classify_status(settings, metrics)
    print("\nStatus:")
    print(f"  Support: {status.support.value} | BCR: {status.bcr.value} | Data: {status.data.value}")


def _json_report(config, settings, costs, metrics, mrs_rows) -> Dict[str, Any]:
    status = classify_status(settings, metrics)
    return {
        'configuration': config.to_dict(),
        'settings': {
            'population': settings.population,
            'valuation_per_unit': settings.valuation_per_unit,
            'currency_label': settings.currency_label,
            'horizon_years': settings.horizon_years,
            'benefit_metric': settings.benefit_metric.value,
        },
        'costs': costs.to_dict() if costs is not None else None,
        'metrics': metrics.to_dict(),
        'mrs': [
            {'attribute': r.attribute, 'label': r.attribute_label,
             'value': r.value, 'direction': r.direction.value}
            for r in mrs_rows
        ],
        'status': {
            'support': status.support.value,
            'bcr': status.bcr.value,
            'data': status.data.value,
        },
    }


def _label(args: argparse.Namespace) -> str:
    return f"{args.country or '?'}/{args.severity or '?'}"


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=getattr(logging, args.log_level),
                  log_file=args.log_file,
                  format_style=args.log_format)

    try:
        config = _resolve_config(args)
        settings = _resolve_settings(args, config)
        calc = PolicyCalculator(_resolve_calculator_config(args))
        costs = _resolve_costs(args, calc, settings, config)
    except ConfigurationError as e:
        EvaluationLogger(_label(args)).failed("; ".join(e.errors))
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except (ValueError, OSError) as e:
        EvaluationLogger(_label(args)).failed(str(e))
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    logger.debug(f"Configuration: {config.to_dict()}")
    eval_log = EvaluationLogger(f"{config.country.value}/{config.outbreak_severity.value}")
    eval_log.start()

    metrics = calc.compute_derived_metrics(settings, config, costs)
    mrs_rows = calc.compute_mrs(config)

    if metrics.support_probability is None:
        eval_log.incomplete("no coefficients for this country and severity")
    else:
        eval_log.result(support=metrics.support_probability, bcr=metrics.bcr)

    if args.json:
        print(json.dumps(_json_report(config, settings, costs, metrics, mrs_rows), indent=2))
    else:
        print_report(config, settings, costs, metrics, mrs_rows)

    return 0


if __name__ == '__main__':
    sys.exit(main())
