"""Survey input contracts.

Enforce the guarantees the loader, taxonomy join and CPUE stages promise
before their output is handed to the densifier.
"""

import numpy as np
import pandas as pd

from trawlgrid.contracts.base import require, require_columns
from trawlgrid.contracts.failure import DuplicateObservationKey, InvalidEffortError

HAUL_COLUMNS = ["haul_id", "year", "lat", "lon", "depth"]
GROUP_COLUMNS = ["group_code", "group_name"]
OBSERVATION_COLUMNS = ["haul_id", "group_code", "biomass", "abundance"]


def assert_hauls(hauls: pd.DataFrame) -> None:
    """Enforce the Haul enumeration contract.

    Parameters
    ----------
    hauls : pd.DataFrame
        Output of SurveyDataLoader.load_hauls()

    Raises
    ------
    ContractViolation
        If columns are missing or haul ids repeat.
    """
    require(
        isinstance(hauls, pd.DataFrame),
        f"Haul contract violated: got {type(hauls)}, expected DataFrame"
    )
    require_columns(hauls, HAUL_COLUMNS, "Haul")

    dupes = hauls["haul_id"][hauls["haul_id"].duplicated()]
    require(
        dupes.empty,
        f"Haul contract violated: duplicate haul_id values {sorted(dupes.unique().tolist())[:10]}"
    )


def assert_groups(groups: pd.DataFrame) -> None:
    """Enforce the Group enumeration contract (unique group codes)."""
    require(
        isinstance(groups, pd.DataFrame),
        f"Group contract violated: got {type(groups)}, expected DataFrame"
    )
    require_columns(groups, GROUP_COLUMNS, "Group")

    dupes = groups["group_code"][groups["group_code"].duplicated()]
    require(
        dupes.empty,
        f"Group contract violated: duplicate group_code values {sorted(dupes.unique().tolist())[:10]}"
    )


def assert_effort(hauls: pd.DataFrame) -> None:
    """Every retained haul must have finite, strictly positive effort.

    Raises
    ------
    InvalidEffortError
        Naming the hauls with zero, negative or missing effort.
    """
    require_columns(hauls, ["haul_id", "effort"], "Effort")
    effort = pd.to_numeric(hauls["effort"], errors="coerce").to_numpy(dtype=float)
    bad = ~(np.isfinite(effort) & (effort > 0))
    if bad.any():
        raise InvalidEffortError(hauls.loc[bad, "haul_id"].tolist())


def assert_observations(observations: pd.DataFrame) -> None:
    """Enforce the Observation collection contract.

    One row per (haul_id, group_code), non-negative finite measurements.

    Raises
    ------
    DuplicateObservationKey
        On the first repeated (haul_id, group_code) key.
    ContractViolation
        If columns are missing or measurements are negative or NaN.
    """
    require(
        isinstance(observations, pd.DataFrame),
        f"Observation contract violated: got {type(observations)}, expected DataFrame"
    )
    require_columns(observations, OBSERVATION_COLUMNS, "Observation")

    keys = observations[["haul_id", "group_code"]]
    dup_mask = keys.duplicated(keep=False)
    if dup_mask.any():
        first = keys[dup_mask].iloc[0]
        count = int(((keys["haul_id"] == first["haul_id"]) &
                     (keys["group_code"] == first["group_code"])).sum())
        raise DuplicateObservationKey(first["haul_id"], first["group_code"], count)

    for col in ("biomass", "abundance"):
        values = observations[col].to_numpy(dtype=float)
        require(
            bool(np.isfinite(values).all()),
            f"Observation contract violated: '{col}' contains NaN or infinite values"
        )
        require(
            bool((values >= 0).all()),
            f"Observation contract violated: '{col}' must be >= 0"
        )
