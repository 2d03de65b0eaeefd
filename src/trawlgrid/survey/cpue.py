"""Catch-per-unit-effort normalization and per-group aggregation.

CPUE divides raw catch weight and count by the haul's swept area. Species
records belonging to the same functional group and haul are then summed so
the densifier receives at most one Observation per (haul_id, group_code).
"""

import logging
from typing import TYPE_CHECKING

import pandas as pd

from trawlgrid.contracts import assert_effort, assert_observations, require_columns

if TYPE_CHECKING:
    from trawlgrid.schemas import InternalConfig

__all__ = ['CpueCalculator']

logger = logging.getLogger(__name__)


class CpueCalculator:
    """Compute biomass and abundance CPUE from catch and haul effort.

    ``biomass = weight / (effort * effort_to_area)`` and
    ``abundance = count / (effort * effort_to_area)``. With the default
    ``effort_to_area = 0.01`` effort in hectares becomes km2, so biomass is
    in kg/km2 and abundance in individuals/km2.

    Examples
    --------
    >>> calc = CpueCalculator(config)
    >>> cpue = calc.compute(catch_with_groups, hauls, excluded_haul_ids)
    >>> observations = calc.aggregate(cpue)
    """

    def __init__(self, config: "InternalConfig"):
        self.effort_to_area = config.cpue.effort_to_area
        self.area_unit = config.cpue.area_unit

    def compute(self, catch: pd.DataFrame, hauls: pd.DataFrame,
                excluded_haul_ids=None) -> pd.DataFrame:
        """Normalize each catch record by its haul's swept area.

        Parameters
        ----------
        catch : pd.DataFrame
            haul_id, group_code, weight, count
        hauls : pd.DataFrame
            Retained hauls with haul_id and effort.
        excluded_haul_ids : iterable, optional
            Hauls dropped by the loader filters; their catch is discarded.

        Returns
        -------
        pd.DataFrame
            haul_id, group_code, biomass, abundance (one row per input record).
            Records whose haul is missing from the haul file keep NaN CPUE and
            their key, so the densifier reports them as unknown references.

        Raises
        ------
        InvalidEffortError
            If a retained haul has zero, negative or missing effort.
        """
        require_columns(catch, ["haul_id", "group_code", "weight", "count"], "Catch")
        require_columns(hauls, ["haul_id", "effort"], "Haul")
        assert_effort(hauls)

        if excluded_haul_ids:
            from_excluded = catch["haul_id"].isin(set(excluded_haul_ids))
            if from_excluded.any():
                logger.info(
                    "Dropping %d catch records from %d unsatisfactory or out-of-range hauls",
                    int(from_excluded.sum()), catch.loc[from_excluded, "haul_id"].nunique(),
                )
            catch = catch[~from_excluded]

        area = hauls.set_index("haul_id")["effort"] * self.effort_to_area
        swept = catch["haul_id"].map(area)

        unknown = swept.isna()
        if unknown.any():
            logger.warning(
                "%d catch records reference %d hauls missing from the haul file",
                int(unknown.sum()), catch.loc[unknown, "haul_id"].nunique(),
            )

        cpue = pd.DataFrame({
            "haul_id": catch["haul_id"],
            "group_code": catch["group_code"],
            "biomass": catch["weight"] / swept,
            "abundance": catch["count"] / swept,
        })
        return cpue.reset_index(drop=True)

    def aggregate(self, cpue: pd.DataFrame) -> pd.DataFrame:
        """Sum species-level CPUE into one Observation per (haul_id, group_code).

        Returns
        -------
        pd.DataFrame
            haul_id, group_code, biomass, abundance
        """
        require_columns(cpue, ["haul_id", "group_code", "biomass", "abundance"], "CPUE")

        observations = (
            cpue.groupby(["haul_id", "group_code"], sort=True)[["biomass", "abundance"]]
            .sum()
            .reset_index()
        )
        assert_observations(observations)

        logger.info(
            "Observations: %d non-zero (haul, group) pairs from %d records (per %s)",
            len(observations), len(cpue), self.area_unit,
        )
        return observations
