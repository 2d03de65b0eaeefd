"""Pipeline contracts: fail-fast enforcement of stage invariants.

Contracts fail immediately and loudly when a stage does not produce its
promised invariants.

Key principle:
- Pydantic validates config correctness
- Contracts validate data and pipeline correctness
"""

from trawlgrid.contracts.failure import (
    ContractViolation,
    DuplicateObservationKey,
    EmptyInputWarning,
    FailurePolicy,
    InvalidEffortError,
    UnknownReferenceError,
)
from trawlgrid.contracts.base import require, require_columns
from trawlgrid.contracts.survey import (
    assert_effort,
    assert_groups,
    assert_hauls,
    assert_observations,
)
from trawlgrid.contracts.dense import assert_dense_table

__all__ = [
    "ContractViolation",
    "DuplicateObservationKey",
    "EmptyInputWarning",
    "FailurePolicy",
    "InvalidEffortError",
    "UnknownReferenceError",
    "require",
    "require_columns",
    "assert_effort",
    "assert_groups",
    "assert_hauls",
    "assert_observations",
    "assert_dense_table",
]
