"""Tests for pipeline contracts.

These tests verify that contracts are enforced at stage boundaries.
They test contract violations directly, without the stages around them.
"""

import numpy as np
import pandas as pd
import pytest

pytestmark = pytest.mark.unit

from trawlgrid.contracts import (
    ContractViolation,
    DuplicateObservationKey,
    FailurePolicy,
    InvalidEffortError,
    UnknownReferenceError,
    assert_dense_table,
    assert_effort,
    assert_groups,
    assert_hauls,
    assert_observations,
    require,
)


class TestRequire:
    """Test the base enforcement function."""

    def test_require_passes_on_true(self):
        require(True, "never raised")

    def test_require_raises_contract_violation(self):
        with pytest.raises(ContractViolation, match="boom"):
            require(False, "boom")

    def test_fail_fast_is_the_only_policy(self):
        assert [p.value for p in FailurePolicy] == ["fail_fast"]


class TestHaulContract:
    """Test haul enumeration contract."""

    def test_passes_with_valid_hauls(self, two_hauls):
        assert_hauls(two_hauls)

    def test_fails_without_depth(self, two_hauls):
        with pytest.raises(ContractViolation, match="missing required column 'depth'"):
            assert_hauls(two_hauls.drop(columns=["depth"]))

    def test_fails_on_non_dataframe(self):
        with pytest.raises(ContractViolation, match="expected DataFrame"):
            assert_hauls({"haul_id": ["h1"]})

    def test_fails_on_duplicate_ids(self, two_hauls):
        hauls = two_hauls.assign(haul_id=["h1", "h1"])
        with pytest.raises(ContractViolation, match="duplicate haul_id"):
            assert_hauls(hauls)


class TestGroupContract:
    """Test group enumeration contract."""

    def test_passes_with_valid_groups(self, two_groups):
        assert_groups(two_groups)

    def test_fails_without_name(self, two_groups):
        with pytest.raises(ContractViolation, match="group_name"):
            assert_groups(two_groups.drop(columns=["group_name"]))


class TestEffortContract:
    """Test the positive-effort precondition."""

    def test_passes_with_positive_effort(self):
        assert_effort(pd.DataFrame({"haul_id": ["a", "b"], "effort": [1.0, 0.5]}))

    def test_names_every_bad_haul(self):
        hauls = pd.DataFrame({"haul_id": ["a", "b", "c"], "effort": [0.0, 2.0, np.inf]})
        with pytest.raises(InvalidEffortError) as excinfo:
            assert_effort(hauls)
        assert excinfo.value.haul_ids == ["a", "c"]

    def test_long_lists_are_truncated(self):
        hauls = pd.DataFrame({"haul_id": [str(i) for i in range(15)], "effort": [0.0] * 15})
        with pytest.raises(InvalidEffortError, match=r"\+5 more"):
            assert_effort(hauls)


class TestObservationContract:
    """Test observation collection contract."""

    def test_passes_with_unique_keys(self, make_observations):
        assert_observations(make_observations([("h1", "g1", 1.0, 1.0), ("h1", "g2", 0.0, 0.0)]))

    def test_duplicate_key_reports_count(self, make_observations):
        obs = make_observations([
            ("h1", "g1", 1.0, 1.0),
            ("h1", "g1", 2.0, 1.0),
            ("h1", "g1", 3.0, 1.0),
        ])
        with pytest.raises(DuplicateObservationKey, match="3 times"):
            assert_observations(obs)

    def test_nan_abundance_rejected(self, make_observations):
        obs = make_observations([("h1", "g1", 1.0, np.nan)])
        with pytest.raises(ContractViolation, match="abundance"):
            assert_observations(obs)


class TestDenseContract:
    """Test dense table contract."""

    def _dense(self, rows):
        return pd.DataFrame(rows, columns=[
            "haul_id", "year", "lat", "lon", "depth",
            "group_code", "group_name", "biomass", "abundance",
        ])

    def test_passes_with_full_product(self):
        dense = self._dense([
            ("h1", 2019, 57.5, -165.0, 70.0, "g1", "Cod", 1.0, 1.0),
            ("h1", 2019, 57.5, -165.0, 70.0, "g2", "Sole", 0.0, 0.0),
        ])
        assert_dense_table(dense, 1, 2)

    def test_fails_on_wrong_cardinality(self):
        dense = self._dense([("h1", 2019, 57.5, -165.0, 70.0, "g1", "Cod", 1.0, 1.0)])
        with pytest.raises(ContractViolation, match="expected 1 x 2 = 2"):
            assert_dense_table(dense, 1, 2)

    def test_fails_on_nan_fill(self):
        dense = self._dense([
            ("h1", 2019, 57.5, -165.0, 70.0, "g1", "Cod", 1.0, 1.0),
            ("h1", 2019, 57.5, -165.0, 70.0, "g2", "Sole", np.nan, np.nan),
        ])
        with pytest.raises(ContractViolation, match="zero-filled"):
            assert_dense_table(dense, 1, 2)


class TestErrorMessages:
    """Keyed errors name the key that triggered the abort."""

    def test_unknown_reference_message(self):
        err = UnknownReferenceError(haul_id="h9", detail="haul not in haul enumeration")
        assert "haul_id='h9'" in str(err)
        assert err.group_code is None

    def test_unknown_species_message(self):
        err = UnknownReferenceError(species_code="99999")
        assert str(err) == "Unknown reference (species_code='99999')"
