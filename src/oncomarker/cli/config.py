"""
Configuration file support for the OncoMarker CLI.

Supports YAML and JSON config files with CLI argument override. A config
file is a flat mapping whose keys mirror the long CLI options (hyphens or
underscores both accepted):

    # brca.yaml
    normal: raw_data/BC-TCGA-Normal.txt
    tumor: raw_data/BC-TCGA-Tumor.txt
    cohort: TCGA-BRCA
    genes: [ESR1, PGR, ERBB2, MKI67, TP53, BRCA1, BRCA2, PTEN]
    output: results/brca
    fc_threshold: 1.0
    p_threshold: 0.05
    gene: TP53
    direction: low_risk_high_expr
"""

from __future__ import annotations

import json
from argparse import Namespace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from oncomarker.stats.risk import RiskDirection

PATH_KEYS = ('normal', 'tumor', 'expression', 'metadata', 'output')

CONFIG_KEYS = PATH_KEYS + (
    'cohort',
    'genes',
    'fc_threshold',
    'p_threshold',
    'n_jobs',
    'gene',
    'direction',
)

# Short option -> destination, for detecting explicitly set arguments
_SHORT_OPTIONS = {
    'o': 'output',
    'g': 'gene',
    'd': 'direction',
    'j': 'n_jobs',
}


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from YAML or JSON file.

    Parameters:
        config_path: Path to config file (.yaml, .yml, or .json)

    Returns:
        Dictionary with configuration values, keys normalized to
        underscore form

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported or invalid

    Examples:
        >>> config = load_config(Path("brca.yaml"))
        >>> config['cohort']
        'TCGA-BRCA'
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()
    if suffix not in ('.yaml', '.yml', '.json'):
        raise ValueError(
            f"Unsupported config format: {suffix}. "
            f"Use .yaml, .yml, or .json"
        )

    try:
        with open(config_path, 'r') as f:
            if suffix == '.json':
                config = json.load(f)
            else:
                config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}") from e

    if config is None:
        return {}

    if not isinstance(config, dict):
        raise ValueError("Config file must contain a dictionary/mapping at top level")

    config = {str(k).replace('-', '_'): v for k, v in config.items()}
    validate_config(config)
    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration keys and values.

    Raises:
        ValueError: If a key is unknown or a value is out of range
    """
    unknown = sorted(set(config) - set(CONFIG_KEYS))
    if unknown:
        raise ValueError(
            f"Unknown config key(s): {unknown}. Valid keys: {list(CONFIG_KEYS)}"
        )

    if 'fc_threshold' in config:
        value = config['fc_threshold']
        if not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f"fc_threshold must be a positive number, got: {value}")

    if 'p_threshold' in config:
        value = config['p_threshold']
        if not isinstance(value, (int, float)) or not 0 < value < 1:
            raise ValueError(f"p_threshold must be in (0, 1), got: {value}")

    if 'n_jobs' in config:
        value = config['n_jobs']
        if not isinstance(value, int) or value == 0:
            raise ValueError(f"n_jobs must be a non-zero integer, got: {value}")

    if 'direction' in config:
        RiskDirection.parse(config['direction'])

    if 'genes' in config and not isinstance(config['genes'], (list, str)):
        raise ValueError(f"genes must be a list or a comma-separated string, got: {config['genes']}")


def _explicit_args(cli_args: Optional[List[str]]) -> set[str]:
    """Destinations of the options that appear literally on the command line."""
    explicit = set()
    for arg in cli_args or []:
        if arg.startswith('--'):
            explicit.add(arg[2:].split('=', 1)[0].replace('-', '_'))
        elif arg.startswith('-') and len(arg) >= 2 and arg[1] in _SHORT_OPTIONS:
            explicit.add(_SHORT_OPTIONS[arg[1]])
    return explicit


def merge_config_with_args(
    config: Dict[str, Any],
    args: Namespace,
    cli_args: Optional[List[str]] = None,
) -> Namespace:
    """
    Merge config file values with CLI arguments.

    Priority (highest to lowest):
    1. Explicitly provided CLI arguments
    2. Config file values
    3. CLI argument defaults

    Only keys that the subcommand defines are merged; the others are
    ignored so one config file can serve several subcommands.

    Parameters:
        config: Configuration dictionary from load_config()
        args: Parsed CLI arguments (argparse.Namespace)
        cli_args: Raw CLI arguments list (for detecting explicit values).
                  If None, assumes all args are defaults

    Returns:
        New Namespace with merged values
    """
    explicit = _explicit_args(cli_args)
    merged = Namespace(**vars(args))

    for key, value in config.items():
        if not hasattr(merged, key) or key in explicit or value is None:
            continue
        if key in PATH_KEYS:
            value = Path(value)
        elif key == 'genes' and isinstance(value, str):
            value = [g.strip() for g in value.split(',') if g.strip()]
        setattr(merged, key, value)

    return merged
