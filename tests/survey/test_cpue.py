"""CpueCalculator: swept-area normalization, aggregation, effort checks."""

import numpy as np
import pandas as pd
import pytest

from trawlgrid.survey.cpue import CpueCalculator
from trawlgrid.contracts import InvalidEffortError

pytestmark = pytest.mark.unit


@pytest.fixture
def hauls():
    return pd.DataFrame({
        "haul_id": ["-101", "-102"],
        "effort": [5.0, 4.0],
    })


@pytest.fixture
def catch():
    return pd.DataFrame({
        "haul_id": ["-101", "-101", "-101", "-102", "-103"],
        "group_code": ["PCOD", "FLAT", "FLAT", "PCOD", "PCOD"],
        "weight": [50.0, 10.0, 5.0, 8.0, 100.0],
        "count": [20.0, 30.0, 10.0, 4.0, 50.0],
    })


def test_compute_divides_by_swept_area(internal_config, hauls, catch):
    cpue = CpueCalculator(internal_config).compute(catch, hauls, excluded_haul_ids={"-103"})

    assert len(cpue) == 4
    # 5 ha = 0.05 km2
    assert cpue.loc[0, "biomass"] == pytest.approx(1000.0)
    assert cpue.loc[0, "abundance"] == pytest.approx(400.0)
    assert cpue.loc[3, "biomass"] == pytest.approx(200.0)


def test_effort_to_area_override(make_config, hauls, catch):
    config = make_config(effort_to_area=1)

    cpue = CpueCalculator(config).compute(catch, hauls, excluded_haul_ids={"-103"})

    assert cpue.loc[0, "biomass"] == pytest.approx(10.0)


def test_aggregate_sums_species_into_groups(internal_config, hauls, catch):
    calc = CpueCalculator(internal_config)

    obs = calc.aggregate(calc.compute(catch, hauls, excluded_haul_ids={"-103"}))

    keyed = obs.set_index(["haul_id", "group_code"])
    assert len(obs) == 3
    assert keyed.loc[("-101", "FLAT"), "biomass"] == pytest.approx(300.0)
    assert keyed.loc[("-101", "FLAT"), "abundance"] == pytest.approx(800.0)
    assert not obs.duplicated(subset=["haul_id", "group_code"]).any()


def test_unknown_haul_catch_is_kept(internal_config, hauls, catch):
    cpue = CpueCalculator(internal_config).compute(catch, hauls)

    unknown = cpue[cpue["haul_id"] == "-103"]
    assert len(unknown) == 1
    assert np.isnan(unknown["biomass"].iloc[0])


@pytest.mark.parametrize("bad_effort", [0.0, -1.0, np.nan])
def test_invalid_effort_rejected(internal_config, hauls, catch, bad_effort):
    hauls.loc[1, "effort"] = bad_effort

    with pytest.raises(InvalidEffortError, match="-102") as excinfo:
        CpueCalculator(internal_config).compute(catch, hauls)

    assert excinfo.value.haul_ids == ["-102"]


def test_aggregate_output_satisfies_observation_contract(internal_config):
    cpue = pd.DataFrame({
        "haul_id": ["a", "a"],
        "group_code": ["G", "G"],
        "biomass": [1.0, 2.0],
        "abundance": [1.0, 1.0],
    })

    obs = CpueCalculator(internal_config).aggregate(cpue)

    assert obs.to_dict("records") == [
        {"haul_id": "a", "group_code": "G", "biomass": 3.0, "abundance": 2.0}
    ]
