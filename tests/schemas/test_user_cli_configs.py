"""UserConfig aliases and normalization; CLIConfig precedence."""

import pytest
from pydantic import ValidationError

from trawlgrid.schemas.user import UserConfig
from trawlgrid.schemas.cli import CLIConfig
from trawlgrid.schemas.param import ParamConfig
from trawlgrid.schemas.resolve import resolve_config


def test_uppercase_aliases():
    user = UserConfig.model_validate({
        "SURVEY_ID": "EBS",
        "BASE_DIR": "/tmp/out",
        "HAUL_FILE": "haul.csv",
        "CATCH_FILE": "catch.csv",
        "TAXONOMY_FILE": "groups.csv",
        "YEAR_START": 1982,
        "UNMAPPED_POLICY": "Error",
        "OUTPUT_FORMAT": "CSV",
    })

    config = resolve_config(ParamConfig(), user, None)

    assert config.survey_id == "EBS"
    assert config.base_dir == "/tmp/out"
    assert config.inputs.catch_file == "catch.csv"
    assert config.filters.year_start == 1982
    assert config.taxonomy.unmapped_policy == "error"
    assert config.output.format == "csv"


def test_unknown_legacy_keys_are_ignored():
    user = UserConfig.model_validate({"SURVEY_ID": "EBS", "LEGACY_KEY": "x"})
    assert user.survey_id == "EBS"


def test_numeric_coercion():
    user = UserConfig(min_performance=0, effort_to_area=1)
    assert isinstance(user.min_performance, float)
    assert isinstance(user.effort_to_area, float)


def test_flat_year_range_checked():
    with pytest.raises(ValidationError):
        UserConfig(YEAR_START=2020, YEAR_END=2000)


def test_empty_user_config_has_no_overrides():
    assert UserConfig().to_internal_overrides() == {}


def test_cli_overrides_do_not_mutate_user():
    user = UserConfig.model_validate({"SURVEY_ID": "EBS", "BASE_DIR": "/tmp"})
    cli = CLIConfig.model_validate({"survey_id": "GOA"})

    internal = resolve_config(ParamConfig(), user, cli)

    assert internal.survey_id == "GOA"
    assert user.survey_id == "EBS"
    assert internal.base_dir == "/tmp"


def test_cli_input_files_override_user():
    user = UserConfig(haul_file="user_haul.csv", catch_file="user_catch.csv")
    cli = CLIConfig(haul_file="cli_haul.csv")

    config = resolve_config(ParamConfig(), user, cli)

    assert config.inputs.haul_file == "cli_haul.csv"
    assert config.inputs.catch_file == "user_catch.csv"


def test_cli_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        CLIConfig.model_validate({"station": "EBS"})


def test_cli_to_internal_overrides_shape():
    cli = CLIConfig(base_dir="/scratch", output_format="netcdf", log_level="WARNING")

    assert cli.to_internal_overrides() == {
        "base_dir": "/scratch",
        "output": {"format": "netcdf"},
        "logging": {"level": "WARNING"},
    }
