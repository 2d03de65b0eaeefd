"""Core zero-expansion behavior: cardinality, hits, zero-fill, idempotence."""

import pandas as pd
import pytest

from trawlgrid.survey.densifier import ZeroExpansionDensifier
from trawlgrid.contracts.dense import DENSE_COLUMNS

pytestmark = pytest.mark.unit


def _keyed(dense):
    return {
        (r.haul_id, r.group_code): (r.biomass, r.abundance)
        for r in dense.itertuples(index=False)
    }


def test_two_by_two_scenario(two_hauls, two_groups, make_observations):
    obs = make_observations([("h1", "g1", 12.5, 3)])

    dense = ZeroExpansionDensifier().expand(two_hauls, two_groups, obs)

    assert len(dense) == 4
    assert _keyed(dense) == {
        ("h1", "g1"): (12.5, 3.0),
        ("h1", "g2"): (0.0, 0.0),
        ("h2", "g1"): (0.0, 0.0),
        ("h2", "g2"): (0.0, 0.0),
    }


def test_output_columns_and_haul_major_order(two_hauls, two_groups, make_observations):
    dense = ZeroExpansionDensifier().expand(two_hauls, two_groups, make_observations([]))

    assert list(dense.columns) == DENSE_COLUMNS
    assert dense["haul_id"].tolist() == ["h1", "h1", "h2", "h2"]
    assert dense["group_code"].tolist() == ["g1", "g2", "g1", "g2"]


@pytest.mark.parametrize("n_hauls,n_groups", [(1, 1), (3, 2), (7, 5), (10, 1)])
def test_cardinality_is_product(n_hauls, n_groups, make_observations):
    hauls = pd.DataFrame({
        "haul_id": [f"h{i}" for i in range(n_hauls)],
        "year": [2000 + i for i in range(n_hauls)],
        "lat": [55.0] * n_hauls,
        "lon": [-160.0] * n_hauls,
        "depth": [100.0] * n_hauls,
    })
    groups = pd.DataFrame({
        "group_code": [f"g{j}" for j in range(n_groups)],
        "group_name": [f"Group {j}" for j in range(n_groups)],
    })
    obs = make_observations([("h0", "g0", 1.0, 1.0)])

    dense = ZeroExpansionDensifier().expand(hauls, groups, obs)

    assert len(dense) == n_hauls * n_groups
    assert not dense.duplicated(subset=["haul_id", "group_code"]).any()


def test_hits_are_exact_and_misses_are_zero(two_hauls, two_groups, make_observations):
    obs = make_observations([
        ("h1", "g2", 0.1 + 0.2, 7.0),
        ("h2", "g1", 1e-12, 0.5),
    ])

    dense = ZeroExpansionDensifier().expand(two_hauls, two_groups, obs)
    keyed = _keyed(dense)

    # no rounding: the observation values come through bit for bit
    assert keyed[("h1", "g2")] == (0.1 + 0.2, 7.0)
    assert keyed[("h2", "g1")] == (1e-12, 0.5)
    assert keyed[("h1", "g1")] == (0.0, 0.0)
    assert keyed[("h2", "g2")] == (0.0, 0.0)


def test_rows_carry_haul_and_group_attributes(two_hauls, two_groups, make_observations):
    dense = ZeroExpansionDensifier().expand(two_hauls, two_groups, make_observations([]))

    row = dense[(dense["haul_id"] == "h2") & (dense["group_code"] == "g1")].iloc[0]
    assert row["year"] == 2020
    assert row["lat"] == 58.0
    assert row["lon"] == -166.0
    assert row["depth"] == 85.0
    assert row["group_name"] == "Pacific cod"


def test_idempotent(two_hauls, two_groups, make_observations):
    obs = make_observations([("h1", "g1", 12.5, 3), ("h2", "g2", 4.0, 1)])
    densifier = ZeroExpansionDensifier()

    first = densifier.expand(two_hauls, two_groups, obs)
    second = densifier.expand(two_hauls, two_groups, obs)

    pd.testing.assert_frame_equal(first, second)


def test_observation_order_does_not_matter(two_hauls, two_groups, make_observations):
    rows = [("h1", "g1", 12.5, 3), ("h2", "g2", 4.0, 1), ("h1", "g2", 2.0, 2)]
    densifier = ZeroExpansionDensifier()

    forward = densifier.expand(two_hauls, two_groups, make_observations(rows))
    backward = densifier.expand(two_hauls, two_groups, make_observations(rows[::-1]))

    assert _keyed(forward) == _keyed(backward)


def test_inputs_are_not_mutated(two_hauls, two_groups, make_observations):
    obs = make_observations([("h1", "g1", 12.5, 3)])
    before = (two_hauls.copy(), two_groups.copy(), obs.copy())

    ZeroExpansionDensifier().expand(two_hauls, two_groups, obs)

    pd.testing.assert_frame_equal(two_hauls, before[0])
    pd.testing.assert_frame_equal(two_groups, before[1])
    pd.testing.assert_frame_equal(obs, before[2])


def test_extra_haul_columns_are_ignored(two_hauls, two_groups, make_observations):
    hauls = two_hauls.assign(effort=[5.0, 4.0], performance=[0.0, 0.0])

    dense = ZeroExpansionDensifier().expand(hauls, two_groups, make_observations([]))

    assert list(dense.columns) == DENSE_COLUMNS
