"""CLIConfig: Command-line operational overrides.

Minimal configuration for operational parameters that commonly change
between runs: survey id, input files, output paths, verbosity.
"""

from typing import Literal, Optional
from trawlgrid.schemas.base import TrawlBaseModel


class CLIConfig(TrawlBaseModel):
    """Command-line configuration overrides.

    Operational-only settings that override user and param configs.
    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(
            survey_id="GOA",
            base_dir="/scratch/trawlgrid_output",
            output_format="csv",
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    survey_id: Optional[str] = None
    base_dir: Optional[str] = None
    haul_file: Optional[str] = None
    catch_file: Optional[str] = None
    taxonomy_file: Optional[str] = None
    output_format: Optional[Literal["parquet", "csv", "netcdf"]] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.survey_id is not None:
            overrides["survey_id"] = self.survey_id

        if self.base_dir is not None:
            overrides["base_dir"] = str(self.base_dir)

        inputs = {}
        if self.haul_file is not None:
            inputs["haul_file"] = self.haul_file
        if self.catch_file is not None:
            inputs["catch_file"] = self.catch_file
        if self.taxonomy_file is not None:
            inputs["taxonomy_file"] = self.taxonomy_file
        if inputs:
            overrides["inputs"] = inputs

        if self.output_format is not None:
            overrides["output"] = {"format": self.output_format}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
