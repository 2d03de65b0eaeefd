"""
Directory setup for the survey pipeline.

Flat layout under one base directory:
- output/  dense CPUE tables (parquet, csv or netCDF)
- logs/    pipeline log files
Runtime configuration snapshots are written to the base directory itself.
"""

import uuid
from pathlib import Path
from datetime import datetime, timezone

OUTPUT_EXTENSIONS = {
    "parquet": ".parquet",
    "csv": ".csv",
    "netcdf": ".nc",
}


def setup_output_directories(base_output_dir=None):
    """
    Set up organized output directory structure.

    Parameters
    ----------
    base_output_dir : str or Path, optional
        Base output directory. If None, uses ./output in the current
        working directory.

    Returns
    -------
    dict
        Dictionary with paths: 'base', 'output', 'logs'
    """
    if base_output_dir is None:
        base_output_dir = Path.cwd() / "output"

    base_output_dir = Path(base_output_dir).expanduser().resolve()

    directories = {
        "base": base_output_dir,
        "output": base_output_dir / "output",
        "logs": base_output_dir / "logs",
    }

    for key, path in directories.items():
        path.mkdir(parents=True, exist_ok=True)

    print("\nOutput directories created:")
    for key, path in directories.items():
        print(f"  {key:12s}: {path}")
    print("=" * 70 + "\n")

    return directories


def get_output_path(output_dirs, survey_id, output_format="parquet",
                    filename_pattern="{survey_id}_dense_cpue"):
    """
    Get the dense table path for a survey.

    Parameters
    ----------
    output_dirs : dict
        Output directories from setup_output_directories()
    survey_id : str
        Survey identifier (e.g., 'EBS')
    output_format : str
        'parquet', 'csv' or 'netcdf'
    filename_pattern : str
        Pattern with a ``{survey_id}`` placeholder.

    Returns
    -------
    Path
        Full path: output/{survey_id}_dense_cpue.<ext>

    Example
    -------
    >>> get_output_path(dirs, 'EBS', 'csv')
    Path('output/output/EBS_dense_cpue.csv')
    """
    if output_format not in OUTPUT_EXTENSIONS:
        raise ValueError(
            f"Unknown output format '{output_format}', expected one of {sorted(OUTPUT_EXTENSIONS)}"
        )

    output_dir = Path(output_dirs["output"])
    output_dir.mkdir(parents=True, exist_ok=True)

    filename = filename_pattern.format(survey_id=survey_id)
    return output_dir / f"{filename}{OUTPUT_EXTENSIONS[output_format]}"


def generate_run_id():
    """Return a sortable, unique run identifier: YYYYMMDDTHHMMSSZ_<8 hex>."""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return f"{stamp}_{uuid.uuid4().hex[:8]}"
