"""Survey data processing pipeline.

Runs survey tables through loading, taxonomy join, CPUE, aggregation and
zero-expansion, then persists the dense haul x group table.
"""

import logging
from pathlib import Path
from typing import Optional, Dict, TYPE_CHECKING

import pandas as pd

from trawlgrid.survey.loader import SurveyDataLoader
from trawlgrid.survey.taxonomy import TaxonomyMapper
from trawlgrid.survey.cpue import CpueCalculator
from trawlgrid.survey.densifier import ZeroExpansionDensifier
from trawlgrid.setup_directories import get_output_path
from trawlgrid.contracts import (
    ContractViolation,
    assert_dense_table,
    assert_hauls,
)

if TYPE_CHECKING:
    from trawlgrid.schemas import InternalConfig

__all__ = ['SurveyProcessor']

logger = logging.getLogger(__name__)


class SurveyProcessor:
    """Processes one survey through the complete CPUE pipeline.

    **Processing Pipeline:**

    1. **Load**: Reads haul, catch and taxonomy CSV files, keeps
       satisfactory-performance hauls within the configured years.

    2. **Taxonomy join**: Maps species codes to functional groups and
       enumerates the group set.

    3. **CPUE**: Divides catch weight and count by swept area, drops catch
       from excluded hauls, and sums species into one observation per
       (haul, group).

    4. **Zero-expansion**: Builds the dense haul x group table, with zeros
       where a group was not caught.

    5. **Persistence**: Writes the dense table as parquet, csv or a netCDF
       (haul, group) cube.

    **Failure handling:**

    Any ContractViolation (duplicate observation keys, unknown references,
    invalid effort, malformed inputs) aborts the run before anything is
    written. The violation is logged at CRITICAL and re-raised.

    Example usage::

        processor = SurveyProcessor(config, output_dirs)
        dense = processor.run()
        print(processor.output_path)
    """

    def __init__(self, config: "InternalConfig",
                 output_dirs: Optional[Dict[str, Path]] = None):
        """Initialize processor with validated configuration.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration. ``inputs.haul_file``,
            ``inputs.catch_file`` and ``inputs.taxonomy_file`` are required.

        output_dirs : dict, optional
            Output directory paths (from setup_output_directories). If None,
            run() does not save and save_results() needs an explicit path.

        Raises
        ------
        ValueError
            If an input file is not configured.
        """
        self.config = config
        self.output_dirs = output_dirs

        for name in ("haul_file", "catch_file", "taxonomy_file"):
            if getattr(config.inputs, name) is None:
                raise ValueError(f"inputs.{name} is required to run the survey pipeline")

        self.loader = SurveyDataLoader(self.config)
        self.cpue = CpueCalculator(self.config)
        self.densifier = ZeroExpansionDensifier()

        self.hauls = None
        self.groups = None
        self.observations = None
        self.output_path = None

    def run(self, save: bool = True) -> pd.DataFrame:
        """Run every stage and return the dense table.

        Parameters
        ----------
        save : bool, optional
            Persist the dense table when output_dirs is set (default True).

        Raises
        ------
        ContractViolation
            If any stage contract is violated. Nothing is written.
        FileNotFoundError
            If an input file does not exist.
        """
        inputs = self.config.inputs
        logger.info("Processing survey: %s", self.config.survey_id)

        try:
            # Step 1: Load
            hauls = self.loader.load_hauls(inputs.haul_file)
            assert_hauls(hauls)
            catch = self.loader.load_catch(inputs.catch_file)
            taxonomy = self.loader.load_taxonomy(inputs.taxonomy_file)

            # Step 2: Taxonomy join
            mapper = TaxonomyMapper(taxonomy, self.config)
            groups = mapper.groups()
            catch = mapper.assign(catch)

            # Step 3: CPUE and per-group aggregation
            cpue = self.cpue.compute(catch, hauls, self.loader.excluded_haul_ids)
            observations = self.cpue.aggregate(cpue)

            # Step 4: Zero-expansion
            dense = self.densifier.expand(hauls, groups, observations)
            assert_dense_table(dense, len(hauls), len(groups))

        except ContractViolation as e:
            logger.critical("Pipeline contract violated: %s", e)
            logger.critical("No output written for survey %s. Fix the input data upstream.",
                            self.config.survey_id)
            raise

        self.hauls = hauls
        self.groups = groups
        self.observations = observations

        self._log_group_statistics(dense)

        # Step 5: Persist
        if save and self.output_dirs is not None:
            self.output_path = self.save_results(dense)

        return dense

    def save_results(self, dense: pd.DataFrame, filepath=None) -> Path:
        """Write the dense table in the configured format.

        Parameters
        ----------
        dense : pd.DataFrame
            Output of run() / ZeroExpansionDensifier.expand()
        filepath : str or Path, optional
            Output path. If None, uses
            ``{output_dirs['output']}/{survey_id}_dense_cpue.<ext>``

        Returns
        -------
        Path
            The written file.
        """
        output = self.config.output

        if filepath is None:
            if self.output_dirs is None:
                raise ValueError("save_results() needs a filepath when output_dirs is not set")
            filepath = get_output_path(
                self.output_dirs,
                self.config.survey_id,
                output.format,
                output.filename_pattern,
            )

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        if output.format == "parquet":
            compression = None if output.compression == "none" else output.compression
            dense.to_parquet(filepath, engine='pyarrow', compression=compression, index=False)
        elif output.format == "csv":
            dense.to_csv(filepath, index=False)
        else:
            cube = self.densifier.to_cube(dense, area_unit=self.config.cpue.area_unit)
            cube.attrs["survey_id"] = self.config.survey_id
            if self.config.run_id:
                cube.attrs["run_id"] = self.config.run_id
            cube.to_netcdf(filepath, engine="netcdf4")

        logger.info("Exported %d rows to: %s", len(dense), filepath)
        return filepath

    def _log_group_statistics(self, dense: pd.DataFrame):
        """Log encounter rate and mean CPUE for each group."""
        if dense.empty:
            return

        stats = (
            dense.assign(present=dense["biomass"] > 0)
            .groupby(["group_code", "group_name"], sort=True)
            .agg(
                encounter=("present", "mean"),
                mean_biomass=("biomass", "mean"),
                mean_abundance=("abundance", "mean"),
            )
        )
        for (code, name), row in stats.iterrows():
            logger.debug(
                "  %-10s %-30s encounter=%5.1f%% mean_biomass=%.3f mean_abundance=%.3f",
                code, name, 100.0 * row["encounter"], row["mean_biomass"], row["mean_abundance"],
            )
        logger.info(
            "Dense table: %d hauls x %d groups, median encounter rate %.1f%%",
            dense["haul_id"].nunique(), len(stats), 100.0 * stats["encounter"].median(),
        )
