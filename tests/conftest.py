"""Root-level pytest fixtures for the trawlgrid test suite.

Provides shared configuration fixtures following the Pydantic-based
architecture, plus small synthetic survey tables (hauls, catch, taxonomy)
written to CSV in the AFSC export layout.
"""

import pytest
import pandas as pd

from trawlgrid.schemas import ParamConfig, UserConfig, resolve_config
from trawlgrid.setup_directories import setup_output_directories


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides)."""
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_policy(make_config):
    ...     config = make_config(unmapped_policy="error")
    ...     assert config.taxonomy.unmapped_policy == "error"
    """
    def _make(**user_overrides):
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Canonical tables for densifier tests
# =============================================================================

@pytest.fixture
def two_hauls():
    return pd.DataFrame({
        "haul_id": ["h1", "h2"],
        "year": [2019, 2020],
        "lat": [57.5, 58.0],
        "lon": [-165.0, -166.0],
        "depth": [70.0, 85.0],
    })


@pytest.fixture
def two_groups():
    return pd.DataFrame({
        "group_code": ["g1", "g2"],
        "group_name": ["Pacific cod", "Deep demersal fish"],
    })


@pytest.fixture
def make_observations():
    """Build an Observation DataFrame from (haul_id, group_code, biomass, abundance) tuples."""
    def _make(rows):
        return pd.DataFrame(rows, columns=["haul_id", "group_code", "biomass", "abundance"])
    return _make


# =============================================================================
# Raw survey files (AFSC-style column names)
# =============================================================================

HAUL_ROWS = [
    # HAULJOIN, YEAR, LAT, LON, DEPTH, PERFORMANCE, AREA_SWEPT_HA
    ("-101", 2019, 57.5, -165.0, 70.0, 0.0, 5.0),
    ("-102", 2019, 58.0, -166.0, 85.0, 0.0, 4.0),
    ("-103", 2020, 58.5, -167.0, 110.0, -1.0, 5.0),
    ("-104", 2021, 59.0, -168.0, 120.0, 0.0, 2.5),
]

CATCH_ROWS = [
    # HAULJOIN, SPECIES_CODE, WEIGHT, NUMBER_FISH
    ("-101", "21720", 50.0, 20.0),
    ("-101", "10110", 10.0, 30.0),
    ("-101", "10210", 5.0, 10.0),
    ("-102", "21720", 8.0, 4.0),
    ("-103", "21720", 100.0, 50.0),
    ("-104", "99999", 1.0, 1.0),
    ("-104", "10110", 2.5, None),
]

TAXONOMY_ROWS = [
    # SPECIES_CODE, GROUP_CODE, GROUP_NAME
    ("21720", "PCOD", "Pacific cod"),
    ("10110", "FLAT", "Flatfish"),
    ("10210", "FLAT", "Flatfish"),
    ("40500", "DDEM", "Deep demersal fish"),
]


@pytest.fixture
def survey_frames():
    """Raw survey tables as DataFrames, before any renaming."""
    hauls = pd.DataFrame(HAUL_ROWS, columns=[
        "HAULJOIN", "YEAR", "START_LATITUDE", "START_LONGITUDE",
        "BOTTOM_DEPTH", "PERFORMANCE", "AREA_SWEPT_HA",
    ])
    catch = pd.DataFrame(CATCH_ROWS, columns=["HAULJOIN", "SPECIES_CODE", "WEIGHT", "NUMBER_FISH"])
    taxonomy = pd.DataFrame(TAXONOMY_ROWS, columns=["SPECIES_CODE", "GROUP_CODE", "GROUP_NAME"])
    return {"haul": hauls, "catch": catch, "taxonomy": taxonomy}


@pytest.fixture
def survey_files(tmp_path, survey_frames):
    """Write the raw survey tables to CSV and return their paths.

    Tests that need a broken input can edit ``survey_frames`` first and then
    call the returned ``write`` helper again.
    """
    data_dir = tmp_path / "data"
    data_dir.mkdir()

    def write(frames=None):
        frames = frames or survey_frames
        paths = {}
        for name, df in frames.items():
            path = data_dir / f"{name}.csv"
            df.to_csv(path, index=False)
            paths[f"{name}_file"] = str(path)
        return paths

    paths = write()
    paths["write"] = write
    return paths


@pytest.fixture
def survey_config(make_config, survey_files, tmp_path):
    """InternalConfig pointing at the synthetic survey files."""
    return make_config(
        survey_id="TEST",
        base_dir=str(tmp_path / "out"),
        haul_file=survey_files["haul_file"],
        catch_file=survey_files["catch_file"],
        taxonomy_file=survey_files["taxonomy_file"],
    )


@pytest.fixture
def output_dirs(tmp_path):
    """Standard trawlgrid output directory structure under tmp_path."""
    return setup_output_directories(tmp_path / "out")
