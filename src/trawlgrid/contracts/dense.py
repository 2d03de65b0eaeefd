"""Dense table contract.

Enforces the guarantee that after zero-expansion the table is the exact
cross product of hauls and groups, ready for the modeling library.
"""

import pandas as pd

from trawlgrid.contracts.base import require, require_columns

DENSE_COLUMNS = [
    "haul_id",
    "year",
    "lat",
    "lon",
    "depth",
    "group_code",
    "group_name",
    "biomass",
    "abundance",
]


def assert_dense_table(dense: pd.DataFrame, n_hauls: int, n_groups: int) -> None:
    """Enforce dense stage contract.

    Parameters
    ----------
    dense : pd.DataFrame
        Output from ZeroExpansionDensifier.expand()

    n_hauls, n_groups : int
        Sizes of the enumerations the table was built from.

    Raises
    ------
    ContractViolation
        If cardinality, key uniqueness or zero-fill is broken.
    """
    require(
        isinstance(dense, pd.DataFrame),
        f"Dense contract violated: output is {type(dense)}, expected DataFrame"
    )
    require_columns(dense, DENSE_COLUMNS, "Dense")

    expected = n_hauls * n_groups
    require(
        len(dense) == expected,
        f"Dense contract violated: got {len(dense)} rows, expected {n_hauls} x {n_groups} = {expected}"
    )
    require(
        not dense.duplicated(subset=["haul_id", "group_code"]).any(),
        "Dense contract violated: (haul_id, group_code) pairs are not unique"
    )
    require(
        not dense[["biomass", "abundance"]].isna().any().any(),
        "Dense contract violated: biomass/abundance must be zero-filled, found NaN"
    )
