"""Zero-expansion of sparse CPUE observations into a dense haul x group table.

Survey catch tables only list what was caught. Species-distribution models
need the absences too: one row for every haul and every functional group,
with explicit zeros where the group was not caught. This module builds that
dense table.

The observation collection is indexed once by (haul_id, group_code); the
cross product of hauls and groups is then filled by one hash lookup per
pair, so the cost is O(|hauls| * |groups| + |observations|) rather than a
re-scan of the observations for every pair.

Inputs are validated before anything is produced:

- a repeated (haul_id, group_code) raises DuplicateObservationKey
- a haul id or group code outside the enumerations raises UnknownReferenceError
- an empty haul or group enumeration logs an EmptyInputWarning and yields
  an empty table
"""

import logging
import warnings
from typing import Iterator, NamedTuple, Optional

import numpy as np
import pandas as pd
import xarray as xr

from trawlgrid.contracts import (
    DuplicateObservationKey,
    EmptyInputWarning,
    UnknownReferenceError,
    assert_groups,
    assert_hauls,
    assert_observations,
    require_columns,
)
from trawlgrid.contracts.dense import DENSE_COLUMNS

__all__ = ['DenseRecord', 'ZeroExpansionDensifier']

logger = logging.getLogger(__name__)

HAUL_ATTRS = ["haul_id", "year", "lat", "lon", "depth"]
GROUP_ATTRS = ["group_code", "group_name"]
VALUE_COLUMNS = ["biomass", "abundance"]


class DenseRecord(NamedTuple):
    """One (haul, group) cell of the dense table."""
    haul_id: object
    year: object
    lat: float
    lon: float
    depth: float
    group_code: str
    group_name: str
    biomass: float
    abundance: float


class ZeroExpansionDensifier:
    """Expand non-zero observations to the full haul x group cross product.

    The densifier is stateless; the same instance can expand any number of
    inputs and running it twice on the same inputs gives the same table.

    Examples
    --------
    >>> densifier = ZeroExpansionDensifier()
    >>> dense = densifier.expand(hauls, groups, observations)
    >>> len(dense) == len(hauls) * len(groups)
    True

    Streaming form, for tables too large to hold twice in memory:

    >>> for record in densifier.iter_records(hauls, groups, observations):
    ...     writer.write(record)
    """

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate(self, hauls: pd.DataFrame, groups: pd.DataFrame,
                  observations: pd.DataFrame) -> bool:
        """Check all three inputs. Returns False when the result is trivially empty."""
        assert_hauls(hauls)
        assert_groups(groups)
        assert_observations(observations)

        self._check_references(
            observations,
            pd.Index(hauls["haul_id"]),
            pd.Index(groups["group_code"]),
        )

        if hauls.empty or groups.empty:
            which = "hauls" if hauls.empty else "groups"
            message = (
                f"Zero-expansion input has no {which} "
                f"({len(hauls)} hauls x {len(groups)} groups); dense table is empty"
            )
            logger.warning(message)
            warnings.warn(message, EmptyInputWarning, stacklevel=3)
            return False

        return True

    @staticmethod
    def _check_references(observations: pd.DataFrame, haul_ids: pd.Index,
                          group_codes: pd.Index) -> None:
        bad_haul = ~observations["haul_id"].isin(haul_ids)
        if bad_haul.any():
            row = observations[bad_haul].iloc[0]
            raise UnknownReferenceError(
                haul_id=row["haul_id"],
                group_code=row["group_code"],
                detail=f"haul not in haul enumeration ({int(bad_haul.sum())} observations affected)",
            )

        bad_group = ~observations["group_code"].isin(group_codes)
        if bad_group.any():
            row = observations[bad_group].iloc[0]
            raise UnknownReferenceError(
                haul_id=row["haul_id"],
                group_code=row["group_code"],
                detail=f"group not in group enumeration ({int(bad_group.sum())} observations affected)",
            )

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------

    @staticmethod
    def build_index(observations: pd.DataFrame) -> dict:
        """Map (haul_id, group_code) to (biomass, abundance).

        Built in one pass over the observations.

        Raises
        ------
        DuplicateObservationKey
            If a key appears more than once.
        """
        require_columns(observations, ["haul_id", "group_code"] + VALUE_COLUMNS, "Observation")

        index = {}
        seen_twice = {}
        for haul_id, group_code, biomass, abundance in observations[
            ["haul_id", "group_code"] + VALUE_COLUMNS
        ].itertuples(index=False, name=None):
            key = (haul_id, group_code)
            if key in index:
                seen_twice[key] = seen_twice.get(key, 1) + 1
                continue
            index[key] = (biomass, abundance)

        if seen_twice:
            (haul_id, group_code), count = next(iter(seen_twice.items()))
            raise DuplicateObservationKey(haul_id, group_code, count)

        return index

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------

    def expand(self, hauls: pd.DataFrame, groups: pd.DataFrame,
               observations: pd.DataFrame) -> pd.DataFrame:
        """Build the dense table as a DataFrame.

        Parameters
        ----------
        hauls : pd.DataFrame
            haul_id, year, lat, lon, depth (extra columns are ignored)
        groups : pd.DataFrame
            group_code, group_name
        observations : pd.DataFrame
            haul_id, group_code, biomass, abundance; at most one row per key

        Returns
        -------
        pd.DataFrame
            Columns haul_id, year, lat, lon, depth, group_code, group_name,
            biomass, abundance. Haul-major order: every group for the first
            haul, then every group for the second, and so on.

        Raises
        ------
        DuplicateObservationKey, UnknownReferenceError, ContractViolation
        """
        if not self._validate(hauls, groups, observations):
            return self._empty_table(hauls, groups)

        n_hauls, n_groups = len(hauls), len(groups)

        haul_part = hauls[HAUL_ATTRS].iloc[np.repeat(np.arange(n_hauls), n_groups)]
        group_part = groups[GROUP_ATTRS].iloc[np.tile(np.arange(n_groups), n_hauls)]
        haul_part = haul_part.reset_index(drop=True)
        group_part = group_part.reset_index(drop=True)

        pairs = pd.MultiIndex.from_arrays(
            [haul_part["haul_id"], group_part["group_code"]],
            names=["haul_id", "group_code"],
        )
        if observations.empty:
            values = pd.DataFrame(0.0, index=range(len(pairs)), columns=VALUE_COLUMNS)
        else:
            values = (
                observations.set_index(["haul_id", "group_code"])[VALUE_COLUMNS]
                .astype(float)
                .reindex(pairs, fill_value=0.0)
                .reset_index(drop=True)
            )

        dense = pd.concat([haul_part, group_part, values], axis=1)[DENSE_COLUMNS]

        logger.info(
            "Zero-expanded %d observations to %d rows (%d hauls x %d groups, %.1f%% non-zero)",
            len(observations), len(dense), n_hauls, n_groups,
            100.0 * len(observations) / len(dense),
        )
        return dense

    def iter_records(self, hauls: pd.DataFrame, groups: pd.DataFrame,
                     observations: pd.DataFrame) -> Iterator[DenseRecord]:
        """Stream the dense table one DenseRecord at a time.

        Validation and index construction happen eagerly, when this method is
        called, so a bad input raises before the first record is produced.
        The returned iterator is finite and can be consumed once.
        """
        if not self._validate(hauls, groups, observations):
            return iter(())

        index = self.build_index(observations)
        haul_rows = list(hauls[HAUL_ATTRS].itertuples(index=False, name=None))
        group_rows = list(groups[GROUP_ATTRS].itertuples(index=False, name=None))

        def _records():
            for haul_id, year, lat, lon, depth in haul_rows:
                for group_code, group_name in group_rows:
                    biomass, abundance = index.get((haul_id, group_code), (0.0, 0.0))
                    yield DenseRecord(
                        haul_id, year, lat, lon, depth,
                        group_code, group_name,
                        float(biomass), float(abundance),
                    )

        return _records()

    @staticmethod
    def _empty_table(hauls: pd.DataFrame, groups: pd.DataFrame) -> pd.DataFrame:
        columns = {}
        for col in HAUL_ATTRS:
            columns[col] = hauls[col].iloc[:0]
        for col in GROUP_ATTRS:
            columns[col] = groups[col].iloc[:0]
        for col in VALUE_COLUMNS:
            columns[col] = pd.Series([], dtype=float)
        return pd.DataFrame({k: v.reset_index(drop=True) for k, v in columns.items()})

    # ------------------------------------------------------------------
    # Cube
    # ------------------------------------------------------------------

    @staticmethod
    def to_cube(dense: pd.DataFrame, area_unit: Optional[str] = None) -> xr.Dataset:
        """Reshape a dense table into a (haul, group) xarray.Dataset.

        Haul attributes become coordinates along ``haul`` and group names a
        coordinate along ``group``. Hauls and groups keep their order of
        first appearance in the table.
        """
        require_columns(dense, DENSE_COLUMNS, "Dense")

        haul_meta = dense.drop_duplicates("haul_id").set_index("haul_id")
        group_meta = dense.drop_duplicates("group_code").set_index("group_code")

        data_vars = {}
        for col in VALUE_COLUMNS:
            grid = dense.pivot(index="haul_id", columns="group_code", values=col)
            grid = grid.reindex(index=haul_meta.index, columns=group_meta.index)
            data_vars[col] = (("haul", "group"), grid.to_numpy(dtype=float))

        year = haul_meta["year"]
        if year.isna().any():
            year_values = pd.to_numeric(year).to_numpy(dtype=float)
        else:
            year_values = year.to_numpy(dtype=np.int64)

        ds = xr.Dataset(
            data_vars,
            coords={
                "haul": haul_meta.index.astype(str).to_numpy(),
                "group": group_meta.index.astype(str).to_numpy(),
                "year": ("haul", year_values),
                "lat": ("haul", haul_meta["lat"].to_numpy(dtype=float)),
                "lon": ("haul", haul_meta["lon"].to_numpy(dtype=float)),
                "depth": ("haul", haul_meta["depth"].to_numpy(dtype=float)),
                "group_name": ("group", group_meta["group_name"].astype(str).to_numpy()),
            },
        )
        if area_unit:
            ds["biomass"].attrs["units"] = f"kg {area_unit}-1"
            ds["abundance"].attrs["units"] = f"count {area_unit}-1"
        ds.attrs["description"] = "Zero-filled CPUE by haul and functional group"
        return ds
