"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for generic
contracts. Keyed violations (duplicates, unknown references) raise their
dedicated ContractViolation subclasses directly.
"""

from trawlgrid.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Enforce a pipeline contract.

    Called at stage boundaries to verify the preceding stage produced the
    guaranteed invariants. It is fail-fast: no recovery, no fallback.

    Parameters
    ----------
    condition : bool
        The invariant that must be true. If False, ContractViolation is raised.

    message : str
        Error message explaining the contract violation.

    Raises
    ------
    ContractViolation
        If condition is False.

    Examples
    --------
    >>> require("haul_id" in df.columns, "Haul contract: missing 'haul_id' column")
    """
    if not condition:
        raise ContractViolation(message)


def require_columns(df, columns, stage: str) -> None:
    """Require every name in ``columns`` to be a column of ``df``."""
    for col in columns:
        require(
            col in df.columns,
            f"{stage} contract violated: missing required column '{col}'"
        )
