import pandas as pd
import pytest

from report import format_cost_options, row_cost_display, solution_frame, stages_frame
from workforce import CostOption, SolverConfig, WorkforceModel, solve


def make_solution():
    return solve(WorkforceModel(
        horizon_length=3,
        initial_headcount=5,
        excess_cost_per_unit=1,
        hire_fixed_cost=10,
        hire_per_unit_cost=2,
        fire_cost_per_unit=3,
        attrition_per_period=0,
        demand_per_period=[7, 4, 6],
    ))


def test_format_cost_options():
    options = [CostOption(6, 14.0), CostOption(7, 17.0)]
    assert format_cost_options(options) == " (6, 14)  (7, 17) "


def test_format_cost_options_keeps_fractions():
    assert format_cost_options([CostOption(1, 2.5)]) == " (1, 2.5) "
    assert format_cost_options([]) == ""


def test_row_cost_display_raw_or_formatted():
    row = make_solution().stages[1].row_for(7)
    assert row_cost_display(row) == " (4, 23)  (5, 19)  (6, 5)  (7, 4) "
    raw = row_cost_display(row, format_cost=False)
    assert raw == row.candidate_costs
    assert raw is not row.candidate_costs


def test_stages_frame():
    df = stages_frame(make_solution().stages)
    assert list(df.columns) == ["stage", "minimum_demand", "previous_headcount",
                                "cost_options", "f", "x"]
    assert len(df) == 1 + 1 + 4
    last = df[df["stage"] == 3].set_index("previous_headcount")
    assert last.loc[7, "f"] == 1
    assert last.loc[7, "x"] == 7
    assert last.loc[4, "cost_options"] == " (6, 14)  (7, 17) "


def test_stages_frame_raw_candidates():
    df = stages_frame(make_solution().stages, SolverConfig(format_cost=False))
    assert df.loc[0, "cost_options"] == [CostOption(7, 18.0)]


def test_solution_frame():
    df = solution_frame(make_solution())
    assert df["period"].tolist() == [1, 2, 3]
    assert df["demand"].tolist() == [7, 4, 6]
    assert df["headcount"].tolist() == [7, 7, 7]
    assert df["action"].tolist() == ["Hire 2 employees", "No change", "No change"]
    assert df["cumulative_cost"].tolist() == pytest.approx([14, 17, 18])
    assert isinstance(df, pd.DataFrame)
