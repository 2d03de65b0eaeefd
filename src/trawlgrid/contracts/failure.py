"""Centralized failure policy for contract violations.

Contracts fail fast, loud, and once. All violations raise ContractViolation
or one of its subclasses, allowing callers to handle pipeline bugs uniformly
while still reporting which key triggered the abort.
"""

from enum import Enum


class FailurePolicy(str, Enum):
    """Failure policy for contract violations.

    FAIL_FAST (default): Raise immediately on contract violation.
    A partial dense table would bias every sample-size dependent result
    downstream, so no best-effort policy exists.
    """
    FAIL_FAST = "fail_fast"


class ContractViolation(RuntimeError):
    """Raised when a pipeline contract is violated.

    This indicates that a stage (or the data handed to it) did not satisfy
    the invariants the next stage depends on.

    Key distinction:
    - ValueError / ValidationError: User/config error (handled by Pydantic)
    - ContractViolation: Broken stage invariant, must be fixed upstream
    """
    pass


class DuplicateObservationKey(ContractViolation):
    """The same (haul_id, group_code) appears more than once in observations.

    Observations must be pre-aggregated to one row per key. Summing or
    picking one here would hide the upstream aggregation bug.
    """

    def __init__(self, haul_id, group_code, count: int = 2):
        self.haul_id = haul_id
        self.group_code = group_code
        self.count = count
        super().__init__(
            f"Duplicate observation key (haul_id={haul_id!r}, group_code={group_code!r}) "
            f"appears {count} times; observations must be pre-aggregated per haul and group"
        )


class UnknownReferenceError(ContractViolation):
    """A record references a haul, group or species outside the enumeration."""

    def __init__(self, haul_id=None, group_code=None, species_code=None, detail: str = ""):
        self.haul_id = haul_id
        self.group_code = group_code
        self.species_code = species_code

        parts = []
        if haul_id is not None:
            parts.append(f"haul_id={haul_id!r}")
        if group_code is not None:
            parts.append(f"group_code={group_code!r}")
        if species_code is not None:
            parts.append(f"species_code={species_code!r}")
        key = ", ".join(parts) or "<empty key>"

        message = f"Unknown reference ({key})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class InvalidEffortError(ContractViolation):
    """Retained hauls with zero, negative or missing sampling effort."""

    def __init__(self, haul_ids):
        self.haul_ids = list(haul_ids)
        shown = ", ".join(repr(h) for h in self.haul_ids[:10])
        more = f" (+{len(self.haul_ids) - 10} more)" if len(self.haul_ids) > 10 else ""
        super().__init__(
            f"Effort must be finite and > 0 for every retained haul; "
            f"offending hauls: {shown}{more}"
        )


class EmptyInputWarning(UserWarning):
    """Haul or group enumeration is empty, so the dense table is empty."""
    pass
