"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with aliases for
common naming patterns (e.g., SURVEY_ID -> survey_id, HAUL_FILE -> haul_file).

UserConfig is intentionally minimal - users only specify what they want to
override from the expert defaults.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator, model_validator
from trawlgrid.schemas.base import TrawlBaseModel


class UserInputsConfig(TrawlBaseModel):
    """User-facing input files config."""
    haul_file: Optional[str] = None
    catch_file: Optional[str] = None
    taxonomy_file: Optional[str] = None
    encoding: Optional[str] = None
    na_values: Optional[list[str]] = None


class UserFiltersConfig(TrawlBaseModel):
    """User-facing haul filters."""
    min_performance: Optional[float] = None
    year_start: Optional[int] = None
    year_end: Optional[int] = None


class UserCpueConfig(TrawlBaseModel):
    """User-facing CPUE config."""
    effort_to_area: Optional[float] = None
    area_unit: Optional[str] = None


class UserOutputConfig(TrawlBaseModel):
    """User-facing output config."""
    format: Optional[str] = None
    compression: Optional[str] = None
    filename_pattern: Optional[str] = None

    @field_validator("format", "compression", mode="before")
    @classmethod
    def normalize_names(cls, v):
        """Normalize format and compression names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v


class UserConfig(TrawlBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify what they
    want to override from ParamConfig defaults.

    Usage
    -----
        user_cfg = UserConfig(
            survey_id="EBS",
            base_dir="/data/trawlgrid",
            haul_file="data/ebs_haul.csv",
            catch_file="data/ebs_catch.csv",
            taxonomy_file="data/groups.csv",
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Top-level operational settings
    survey_id: Optional[str] = Field(None, alias="SURVEY_ID")
    base_dir: Optional[str] = Field(None, alias="BASE_DIR")

    # Input files (flat aliases)
    haul_file: Optional[str] = Field(None, alias="HAUL_FILE")
    catch_file: Optional[str] = Field(None, alias="CATCH_FILE")
    taxonomy_file: Optional[str] = Field(None, alias="TAXONOMY_FILE")

    # Haul filters (flat aliases)
    min_performance: Optional[float] = Field(None, alias="MIN_PERFORMANCE")
    year_start: Optional[int] = Field(None, alias="YEAR_START")
    year_end: Optional[int] = Field(None, alias="YEAR_END")

    # Taxonomy / CPUE / output (flat aliases)
    unmapped_policy: Optional[Literal["drop", "error"]] = Field(None, alias="UNMAPPED_POLICY")
    effort_to_area: Optional[float] = Field(None, alias="EFFORT_TO_AREA")
    output_format: Optional[Literal["parquet", "csv", "netcdf"]] = Field(None, alias="OUTPUT_FORMAT")

    # Nested overrides (advanced users)
    inputs: Optional[UserInputsConfig] = None
    columns: Optional[dict[str, Optional[str]]] = None
    filters: Optional[UserFiltersConfig] = None
    cpue: Optional[UserCpueConfig] = None
    output: Optional[UserOutputConfig] = None

    model_config = TrawlBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("min_performance", "effort_to_area", mode="before")
    @classmethod
    def coerce_numeric_fields(cls, v):
        """Accept int or float for numeric fields."""
        if v is not None:
            return float(v)
        return v

    @field_validator("unmapped_policy", "output_format", mode="before")
    @classmethod
    def normalize_choice_names(cls, v):
        """Normalize choice names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @model_validator(mode="after")
    def check_year_range(self):
        """Flat year_start must not be after year_end."""
        if self.year_start is not None and self.year_end is not None:
            if self.year_start > self.year_end:
                raise ValueError(
                    f"YEAR_START ({self.year_start}) is after YEAR_END ({self.year_end})"
                )
        return self

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

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

        # Inputs section
        inputs = {}
        if self.haul_file is not None:
            inputs["haul_file"] = self.haul_file
        if self.catch_file is not None:
            inputs["catch_file"] = self.catch_file
        if self.taxonomy_file is not None:
            inputs["taxonomy_file"] = self.taxonomy_file
        if self.inputs is not None:
            inputs.update(self.inputs.model_dump(exclude_none=True))
        if inputs:
            overrides["inputs"] = inputs

        # Columns section (nested only)
        if self.columns:
            overrides["columns"] = dict(self.columns)

        # Filters section
        filters = {}
        if self.min_performance is not None:
            filters["min_performance"] = self.min_performance
        if self.year_start is not None:
            filters["year_start"] = self.year_start
        if self.year_end is not None:
            filters["year_end"] = self.year_end
        if self.filters is not None:
            filters.update(self.filters.model_dump(exclude_none=True))
        if filters:
            overrides["filters"] = filters

        if self.unmapped_policy is not None:
            overrides["taxonomy"] = {"unmapped_policy": self.unmapped_policy}

        # CPUE section
        cpue = {}
        if self.effort_to_area is not None:
            cpue["effort_to_area"] = self.effort_to_area
        if self.cpue is not None:
            cpue.update(self.cpue.model_dump(exclude_none=True))
        if cpue:
            overrides["cpue"] = cpue

        # Output section
        output = {}
        if self.output_format is not None:
            output["format"] = self.output_format
        if self.output is not None:
            output.update(self.output.model_dump(exclude_none=True))
        if output:
            overrides["output"] = output

        return overrides
