"""Read bottom-trawl survey CSV exports into canonical DataFrames.

This module handles loading the three flat files the workflow starts from:
haul descriptions (location, depth, performance, swept area), species-level
catch records, and the species to functional-group taxonomy. Source column
names are renamed to the canonical names every later stage uses.

Key capabilities:
- Configurable source column names (defaults follow AFSC RACE exports)
- Satisfactory-performance and year-range haul filtering
- Year derived from a date column when the export has no year column
- Remembers which hauls the filters excluded, so their catch can be dropped
  instead of being reported as an unknown reference
"""

from pathlib import Path
from typing import TYPE_CHECKING
import logging

import numpy as np
import pandas as pd

from trawlgrid.contracts import require_columns

if TYPE_CHECKING:
    from trawlgrid.schemas import InternalConfig

__all__ = ['SurveyDataLoader']

logger = logging.getLogger(__name__)


class SurveyDataLoader:
    """Load haul, catch and taxonomy tables from CSV.

    Output DataFrames use canonical column names:

    - hauls: haul_id, year, lat, lon, depth, effort, performance
    - catch: haul_id, species_code, weight, count
    - taxonomy: species_code, group_code, group_name

    Notes
    -----
    - Not thread-safe: ``excluded_haul_ids`` is updated by load_hauls()
    - Identifier columns (haul, species, group) are read as strings so that
      codes such as "00710" keep their leading zeros
    - Missing files raise FileNotFoundError; missing columns raise
      ContractViolation naming the column

    Examples
    --------
    >>> loader = SurveyDataLoader(config)
    >>> hauls = loader.load_hauls("ebs_haul.csv")
    >>> catch = loader.load_catch("ebs_catch.csv")
    >>> len(loader.excluded_haul_ids)  # tows dropped by the performance filter
    12
    """

    def __init__(self, config: "InternalConfig"):
        """Initialize loader with validated configuration.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration. Uses the ``inputs``,
            ``columns`` and ``filters`` sections.
        """
        self.config = config
        self.columns = config.columns
        self.filters = config.filters
        self.excluded_haul_ids: set = set()

    def _read_csv(self, path, id_columns) -> pd.DataFrame:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Survey file not found: {path}")

        df = pd.read_csv(
            path,
            dtype={c: str for c in id_columns},
            na_values=self.config.inputs.na_values,
            keep_default_na=True,
            encoding=self.config.inputs.encoding,
        )
        df.columns = [str(c).strip() for c in df.columns]
        logger.debug("Read %d rows from %s", len(df), path.name)
        return df

    @staticmethod
    def _strip_ids(df: pd.DataFrame, columns) -> pd.DataFrame:
        for col in columns:
            df[col] = df[col].astype(str).str.strip()
        return df

    def load_hauls(self, path) -> pd.DataFrame:
        """Load haul descriptions and keep satisfactory tows only.

        Parameters
        ----------
        path : str or Path
            Haul CSV file.

        Returns
        -------
        pd.DataFrame
            One row per retained haul: haul_id, year, lat, lon, depth,
            effort, performance.
        """
        cols = self.columns
        df = self._read_csv(path, [cols.haul_id])

        if cols.year not in df.columns and cols.haul_date and cols.haul_date in df.columns:
            df[cols.year] = pd.to_datetime(df[cols.haul_date], errors="coerce").dt.year
            logger.debug("Derived '%s' from '%s'", cols.year, cols.haul_date)

        source = [cols.haul_id, cols.year, cols.lat, cols.lon, cols.depth,
                  cols.performance, cols.effort]
        require_columns(df, source, "Haul file")

        hauls = df[source].rename(columns={
            cols.haul_id: "haul_id",
            cols.year: "year",
            cols.lat: "lat",
            cols.lon: "lon",
            cols.depth: "depth",
            cols.performance: "performance",
            cols.effort: "effort",
        })
        hauls = self._strip_ids(hauls, ["haul_id"])
        for col in ("lat", "lon", "depth", "performance", "effort"):
            hauls[col] = pd.to_numeric(hauls[col], errors="coerce").astype(float)
        hauls["year"] = pd.to_numeric(hauls["year"], errors="coerce").astype("Int64")

        keep = hauls["performance"] >= self.filters.min_performance
        n_bad_perf = int((~keep).sum())

        if self.filters.year_start is not None:
            keep &= (hauls["year"] >= self.filters.year_start).fillna(False).astype(bool)
        if self.filters.year_end is not None:
            keep &= (hauls["year"] <= self.filters.year_end).fillna(False).astype(bool)

        self.excluded_haul_ids = set(hauls.loc[~keep, "haul_id"])
        retained = hauls[keep.to_numpy()].reset_index(drop=True)

        logger.info(
            "Hauls: %d read, %d retained (%d unsatisfactory performance, %d outside years)",
            len(hauls), len(retained), n_bad_perf, int((~keep).sum()) - n_bad_perf,
        )
        return retained

    def load_catch(self, path) -> pd.DataFrame:
        """Load species-level catch records.

        Missing counts are treated as zero (weight-only records are common
        for invertebrates that are not enumerated).

        Returns
        -------
        pd.DataFrame
            haul_id, species_code, weight, count
        """
        cols = self.columns
        df = self._read_csv(path, [cols.haul_id, cols.species_code])

        source = [cols.haul_id, cols.species_code, cols.weight]
        require_columns(df, source, "Catch file")

        catch = pd.DataFrame({
            "haul_id": df[cols.haul_id],
            "species_code": df[cols.species_code],
            "weight": pd.to_numeric(df[cols.weight], errors="coerce").astype(float),
        })
        if cols.count in df.columns:
            catch["count"] = pd.to_numeric(df[cols.count], errors="coerce").astype(float)
        else:
            logger.warning("Catch file has no '%s' column; abundance will be zero", cols.count)
            catch["count"] = np.nan

        catch = self._strip_ids(catch, ["haul_id", "species_code"])

        n_missing = int(catch["weight"].isna().sum())
        if n_missing:
            logger.warning("Dropping %d catch records with no weight", n_missing)
            catch = catch[catch["weight"].notna()]
        catch["count"] = catch["count"].fillna(0.0)

        logger.info("Catch: %d records, %d species", len(catch), catch["species_code"].nunique())
        return catch.reset_index(drop=True)

    def load_taxonomy(self, path) -> pd.DataFrame:
        """Load the species to functional-group table.

        Returns
        -------
        pd.DataFrame
            species_code, group_code, group_name
        """
        cols = self.columns
        df = self._read_csv(path, [cols.species_code, cols.group_code])

        source = [cols.species_code, cols.group_code, cols.group_name]
        require_columns(df, source, "Taxonomy file")

        taxonomy = df[source].rename(columns={
            cols.species_code: "species_code",
            cols.group_code: "group_code",
            cols.group_name: "group_name",
        })
        taxonomy = taxonomy.dropna(subset=["species_code", "group_code"])
        taxonomy = self._strip_ids(taxonomy, ["species_code", "group_code"])
        taxonomy["group_name"] = taxonomy["group_name"].fillna("").astype(str).str.strip()

        logger.info(
            "Taxonomy: %d species in %d groups",
            len(taxonomy), taxonomy["group_code"].nunique(),
        )
        return taxonomy.reset_index(drop=True)
