"""
Tabular views over solver output: candidate-cost strings and pandas frames of
the solved stage table and the chosen schedule. Nothing here feeds back into
the optimization.
"""

from typing import List, Optional, Sequence, Union

import pandas as pd

from workforce import CostOption, Solution, SolverConfig, Stage, StageRow


def _fmt_number(value) -> str:
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return str(value)


def format_cost_options(options: Sequence[CostOption]) -> str:
    """Render candidates as ' (demand, cost) ' pairs, e.g. ' (6, 14)  (7, 17) '."""
    return "".join(f" ({opt.demand}, {_fmt_number(opt.value)}) " for opt in options)


def row_cost_display(row: StageRow, format_cost: bool = True) -> Union[str, List[CostOption]]:
    if format_cost:
        return format_cost_options(row.candidate_costs)
    return list(row.candidate_costs)


def stages_frame(stages: Sequence[Stage], config: Optional[SolverConfig] = None) -> pd.DataFrame:
    """One row per (stage, previous headcount) with its candidates, f and x."""
    format_cost = (config or SolverConfig()).format_cost
    return pd.DataFrame([{
        "stage":              stage.id + 1,
        "minimum_demand":     stage.minimum_demand,
        "previous_headcount": row.previous_headcount,
        "cost_options":       row_cost_display(row, format_cost),
        "f":                  row.optimal_cost,
        "x":                  row.optimal_headcount,
    } for stage in stages for row in stage.rows],
        columns=["stage", "minimum_demand", "previous_headcount", "cost_options", "f", "x"])


def solution_frame(solution: Solution) -> pd.DataFrame:
    df = pd.DataFrame({
        "period":           range(1, len(solution.path) + 1),
        "demand":           list(solution.model.demand_per_period),
        "headcount":        list(solution.path),
        "incremental_cost": list(solution.incremental_cost),
        "action":           list(solution.interpretation),
    })
    df["cumulative_cost"] = df["incremental_cost"].cumsum()
    return df
