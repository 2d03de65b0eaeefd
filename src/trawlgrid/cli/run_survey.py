"""Core survey pipeline execution logic.

This module contains the actual pipeline runner, separated from argument
parsing. scripts/run_cpue_pipeline.py and the ``trawlgrid`` console script
are thin wrappers around it.
"""

import sys
import json
import shutil
import logging
import argparse
import importlib.util
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, Dict, Any

import pandas as pd

from trawlgrid.setup_directories import setup_output_directories, generate_run_id
from trawlgrid.pipeline.processor import SurveyProcessor
from trawlgrid.contracts import ContractViolation
from trawlgrid.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig, InternalConfig


logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing a CONFIG dict.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Could not load config module from {path}")

    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def setup_logging(config: InternalConfig, output_dirs: Dict[str, Path]) -> Path:
    """Configure root logger with file and console handlers.

    Log file: logs/pipeline_{survey_id}.log. Level from config.logging.level.
    """
    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)

    log_dir = Path(output_dirs["logs"])
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"pipeline_{config.survey_id}.log"

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    fh = logging.FileHandler(log_path)
    fh.setLevel(log_level)
    fh.setFormatter(formatter)
    root.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    logger.info("Logging: level=%s, file=%s", config.logging.level, log_path)
    return log_path


def persist_runtime_config(config: InternalConfig, output_dirs: Dict[str, Path]) -> Path:
    """Save the fully resolved configuration next to the outputs.

    File: {base}/runtime_config_{run_id}.json
    """
    config_dir = Path(output_dirs["base"])
    config_dir.mkdir(parents=True, exist_ok=True)

    config_file = config_dir / f"runtime_config_{config.run_id}.json"

    config_dict = config.model_dump()
    config_dict["created_at"] = datetime.now(timezone.utc).isoformat()

    with open(config_file, 'w') as f:
        json.dump(config_dict, f, indent=2, default=str)

    logger.info("Runtime config saved: %s", config_file)
    return config_file


def run_cpue_pipeline(
    user_config_path: str,
    cli_args: Optional[Dict[str, Any]] = None,
    rerun: bool = False,
    verbose: bool = False
) -> pd.DataFrame:
    """Execute the survey CPUE pipeline.

    This is the core pipeline execution function. It:
    1. Loads and resolves configuration (Param < User < CLI)
    2. Optionally cleans the output directory if rerun=True
    3. Sets up output directories and logging
    4. Persists the runtime configuration with a run id
    5. Runs the SurveyProcessor and writes the dense table

    Parameters
    ----------
    user_config_path : str
        Path to user config file (Python file with CONFIG dict).

    cli_args : dict, optional
        CLI argument overrides. Keys: survey_id, base_dir, haul_file,
        catch_file, taxonomy_file, output_format, log_level. All optional.

    rerun : bool, optional
        If True, delete the base output directory before running.

    verbose : bool, optional
        If True, enable DEBUG logging and print full resolved config.

    Returns
    -------
    pd.DataFrame
        The dense haul x group table.

    Raises
    ------
    FileNotFoundError
        If user_config_path or an input file does not exist.
    ValidationError
        If configuration validation fails.
    ContractViolation
        If the survey data violates a stage contract.

    Examples
    --------
    Run with CLI overrides::

        run_cpue_pipeline(
            "config/ebs.py",
            cli_args={"survey_id": "EBS", "output_format": "csv"},
        )
    """
    param_cfg = ParamConfig()

    user_cfg_dict = load_user_config_dict(user_config_path)
    user_cfg = UserConfig.model_validate(user_cfg_dict)

    cli_args = dict(cli_args or {})
    if verbose and "log_level" not in cli_args:
        cli_args["log_level"] = "DEBUG"

    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    config = resolve_config(param_cfg, user_cfg, cli_cfg)

    if rerun and config.base_dir:
        base_dir_path = Path(config.base_dir)
        if base_dir_path.exists():
            print(f"Cleaning output directory: {base_dir_path}")
            shutil.rmtree(base_dir_path)
            print("Output directory cleaned")

    output_dirs = setup_output_directories(config.base_dir)

    config_dict = config.model_dump()
    config_dict["output_dirs"] = {k: str(v) for k, v in output_dirs.items()}
    config_dict["run_id"] = generate_run_id()
    config = InternalConfig.model_validate(config_dict)

    setup_logging(config, output_dirs)
    persist_runtime_config(config, output_dirs)

    print(f"\n{'='*60}")
    print("trawlgrid Survey CPUE Pipeline")
    print('='*60)
    print(f"Config: {user_config_path}")
    print(f"Survey: {config.survey_id}")
    print(f"Run ID: {config.run_id}")
    print(f"Output: {output_dirs['base']}")
    print('='*60)

    if verbose:
        print("\nFull Internal Configuration:")
        print(json.dumps(config.model_dump(), indent=2, default=str))
        print('='*60)

    processor = SurveyProcessor(config, output_dirs)
    return processor.run()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build a zero-filled haul x functional-group CPUE table from trawl survey CSVs"
    )
    parser.add_argument("config", help="Path to user config file")
    parser.add_argument("--survey-id", help="Override survey ID")
    parser.add_argument("--haul-file", help="Haul CSV file")
    parser.add_argument("--catch-file", help="Catch CSV file")
    parser.add_argument("--taxonomy-file", help="Species to group CSV file")
    parser.add_argument("--output-format", choices=["parquet", "csv", "netcdf"],
                        help="Dense table file format")
    parser.add_argument("--base-dir", help="Output directory")
    parser.add_argument("--rerun", action="store_true", help="Delete output directory before running")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    """Command-line entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    cli_args = {
        "survey_id": args.survey_id,
        "haul_file": args.haul_file,
        "catch_file": args.catch_file,
        "taxonomy_file": args.taxonomy_file,
        "output_format": args.output_format,
        "base_dir": args.base_dir,
    }

    try:
        run_cpue_pipeline(args.config, cli_args=cli_args, rerun=args.rerun, verbose=args.verbose)
    except ContractViolation as e:
        print(f"ERROR: {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
