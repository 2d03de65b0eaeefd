"""Map raw species codes to functional groups.

Each catch record carries a survey species code; ecosystem models work with
aggregated functional groups ("Pacific cod", "Deep demersal fish", ...).
This module joins catch to a taxonomy table and enumerates the Group set
used for zero-expansion.
"""

import logging
from typing import TYPE_CHECKING

import pandas as pd

from trawlgrid.contracts import (
    UnknownReferenceError,
    assert_groups,
    require,
    require_columns,
)

if TYPE_CHECKING:
    from trawlgrid.schemas import InternalConfig

__all__ = ['TaxonomyMapper']

logger = logging.getLogger(__name__)


class TaxonomyMapper:
    """Species to functional-group lookup.

    Parameters
    ----------
    taxonomy : pd.DataFrame
        species_code, group_code, group_name (from SurveyDataLoader.load_taxonomy)
    config : InternalConfig
        Uses ``taxonomy.unmapped_policy``.

    Raises
    ------
    ContractViolation
        If a species maps to more than one group or a group code has more
        than one name.
    """

    def __init__(self, taxonomy: pd.DataFrame, config: "InternalConfig"):
        require_columns(taxonomy, ["species_code", "group_code", "group_name"], "Taxonomy")

        taxonomy = taxonomy.drop_duplicates()
        dup_species = taxonomy["species_code"][taxonomy["species_code"].duplicated()]
        require(
            dup_species.empty,
            "Taxonomy contract violated: species mapped to more than one group: "
            f"{sorted(dup_species.unique().tolist())[:10]}"
        )

        names_per_group = taxonomy.groupby("group_code")["group_name"].nunique()
        ambiguous = names_per_group[names_per_group > 1]
        require(
            ambiguous.empty,
            "Taxonomy contract violated: group codes with more than one name: "
            f"{sorted(ambiguous.index.tolist())[:10]}"
        )

        self.taxonomy = taxonomy.reset_index(drop=True)
        self.unmapped_policy = config.taxonomy.unmapped_policy

    def groups(self) -> pd.DataFrame:
        """Return the duplicate-free Group enumeration, sorted by group code."""
        groups = (
            self.taxonomy[["group_code", "group_name"]]
            .drop_duplicates(subset="group_code")
            .sort_values("group_code", kind="stable")
            .reset_index(drop=True)
        )
        assert_groups(groups)
        return groups

    def assign(self, catch: pd.DataFrame) -> pd.DataFrame:
        """Attach group_code to every catch record.

        Records of species absent from the taxonomy are dropped (and logged)
        under the "drop" policy, or abort the run under the "error" policy.

        Parameters
        ----------
        catch : pd.DataFrame
            haul_id, species_code, weight, count

        Returns
        -------
        pd.DataFrame
            Input columns plus group_code.
        """
        require_columns(catch, ["haul_id", "species_code"], "Catch")

        merged = catch.merge(
            self.taxonomy[["species_code", "group_code"]],
            on="species_code",
            how="left",
            validate="many_to_one",
        )
        unmapped = merged["group_code"].isna()

        if unmapped.any():
            missing = merged.loc[unmapped, "species_code"]
            if self.unmapped_policy == "error":
                raise UnknownReferenceError(
                    species_code=missing.iloc[0],
                    detail=f"species not in taxonomy ({missing.nunique()} unmapped species)",
                )

            weight = merged.loc[unmapped, "weight"].sum() if "weight" in merged else float("nan")
            logger.warning(
                "Dropping %d catch records of %d species with no functional group (total weight %.2f)",
                int(unmapped.sum()), missing.nunique(), weight,
            )
            logger.debug("Unmapped species codes: %s", sorted(missing.unique().tolist()))

        return merged[~unmapped].reset_index(drop=True)
