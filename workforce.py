"""
Workforce DP Planner: solver engine
Optimal hire/fire schedule over a fixed horizon by backward dynamic programming.

Pipeline:
  - Validate the model (lengths, non-negative costs/demands/headcounts).
  - Build one Stage per period holding the feasible inherited headcounts.
  - Solve stages last-to-first: f(prev) = min_b [excess + hire + fire + f_next(b)].
  - Walk the solved stages forward from the initial headcount to get the path,
    per-period incremental cost, and a readable action for each period.
"""

import logging
import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════════
# ERRORS
# ══════════════════════════════════════════════════════════════════════════════
class WorkforceError(Exception):
    """Base exception for all planner errors."""

    pass


class InvalidModelError(WorkforceError, ValueError):
    """Raised when a model violates its structural or numeric invariants."""

    def __init__(self, violations: List[str]):
        self.violations = list(violations)
        super().__init__("Invalid problem model parameters: " + "; ".join(self.violations))


class InternalConsistencyError(WorkforceError, RuntimeError):
    """Raised when a state lookup falls outside a stage's feasible range."""

    pass


# ══════════════════════════════════════════════════════════════════════════════
# CONFIG
# ══════════════════════════════════════════════════════════════════════════════
class FireCostScaling(Enum):
    NONE           = "none"
    BY_STAGE_INDEX = "by_stage_index"   # fire cost × period number (1-based)


@dataclass
class SolverConfig:
    # Render candidate costs as " (d, v) " strings in reports instead of raw lists
    format_cost:        bool            = True
    fire_cost_scaling:  FireCostScaling = FireCostScaling.NONE

    def fire_cost(self, model: "WorkforceModel", stage_id: int) -> float:
        """
        Per-unit firing cost for a stage. BY_STAGE_INDEX scales by the 1-based
        period number (week #1 pays 1x), not by the 0-based stage id.
        """
        base = model.fire_cost_per_unit
        if self.fire_cost_scaling is FireCostScaling.BY_STAGE_INDEX:
            return base * (stage_id + 1)
        return base


# ══════════════════════════════════════════════════════════════════════════════
# PROBLEM MODEL
# ══════════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class WorkforceModel:
    """
    Workforce problem model.

    demand_per_period[i] is the minimum headcount required in period i and its
    length must equal horizon_length. attrition_per_period employees leave on
    their own every period and are not paid the firing cost.
    """
    horizon_length:        int
    initial_headcount:     int
    excess_cost_per_unit:  float
    hire_fixed_cost:       float
    hire_per_unit_cost:    float
    fire_cost_per_unit:    float
    attrition_per_period:  int
    demand_per_period:     Tuple[int, ...]
    time_unit:             str = "week"

    def __post_init__(self):
        # Freeze the demand sequence so a caller's list can't mutate the model
        object.__setattr__(self, "demand_per_period", tuple(self.demand_per_period))

    @property
    def max_demand(self) -> int:
        return max(self.demand_per_period)

    @classmethod
    def from_demand_records(cls, records: Iterable[Dict], initial_headcount: int,
                            excess_cost_per_unit: float, hire_fixed_cost: float,
                            hire_per_unit_cost: float, fire_cost_per_unit: float,
                            attrition_per_period: int = 0,
                            time_unit: str = "week") -> "WorkforceModel":
        """
        Build a model from {"timeunit": n, "workforce": d} records.
        Records are ordered by time unit; the horizon is the record count.
        Time units must be consecutive with no duplicates or gaps.
        """
        ordered = sorted(records, key=lambda r: r["timeunit"])
        units   = [r["timeunit"] for r in ordered]
        if units and units != list(range(units[0], units[0] + len(units))):
            raise InvalidModelError([f"time units must be consecutive without duplicates: {units}"])
        demand  = tuple(r["workforce"] for r in ordered)
        return cls(
            horizon_length=len(demand),
            initial_headcount=initial_headcount,
            excess_cost_per_unit=excess_cost_per_unit,
            hire_fixed_cost=hire_fixed_cost,
            hire_per_unit_cost=hire_per_unit_cost,
            fire_cost_per_unit=fire_cost_per_unit,
            attrition_per_period=attrition_per_period,
            demand_per_period=demand,
            time_unit=time_unit,
        )

    @classmethod
    def from_dict(cls, data: Dict) -> "WorkforceModel":
        demand = data["demand_per_period"]
        return cls(
            horizon_length=data.get("horizon_length", len(demand)),
            initial_headcount=data["initial_headcount"],
            excess_cost_per_unit=data["excess_cost_per_unit"],
            hire_fixed_cost=data["hire_fixed_cost"],
            hire_per_unit_cost=data["hire_per_unit_cost"],
            fire_cost_per_unit=data["fire_cost_per_unit"],
            attrition_per_period=data.get("attrition_per_period", 0),
            demand_per_period=demand,
            time_unit=data.get("time_unit", "week"),
        )


def sample_model() -> WorkforceModel:
    """
    Five-week demo problem.

    Only the demand and the excess/fixed-hire/per-unit-hire costs (300/400/200)
    are demo data. fire_cost_per_unit=200 and initial_headcount=5 are fill-ins.
    """
    return WorkforceModel.from_demand_records(
        [{"timeunit": w + 1, "workforce": d} for w, d in enumerate([5, 7, 8, 4, 6])],
        initial_headcount=5,
        excess_cost_per_unit=300,
        hire_fixed_cost=400,
        hire_per_unit_cost=200,
        fire_cost_per_unit=200,
    )


# ══════════════════════════════════════════════════════════════════════════════
# STAGE TABLE
# ══════════════════════════════════════════════════════════════════════════════
class CostOption(NamedTuple):
    demand: int     # headcount assumed for the period
    value:  float   # total cost-to-go evaluated at that headcount


@dataclass
class StageRow:
    previous_headcount: int                 # x_(i-1), the DP state
    candidate_costs:    List[CostOption] = field(default_factory=list)
    optimal_cost:       float = 0.0         # f
    optimal_headcount:  int   = 0           # x

    @property
    def f(self) -> float:
        return self.optimal_cost

    @property
    def x(self) -> int:
        return self.optimal_headcount


@dataclass
class Stage:
    id:             int
    minimum_demand: int
    rows:           List[StageRow]

    @property
    def lowest_headcount(self) -> int:
        return self.rows[0].previous_headcount

    @property
    def highest_headcount(self) -> int:
        return self.rows[-1].previous_headcount

    def row_for(self, headcount: int) -> StageRow:
        """Row whose previous_headcount equals headcount (rows are contiguous)."""
        offset = headcount - self.lowest_headcount
        if not 0 <= offset < len(self.rows):
            raise InternalConsistencyError(
                f"Stage {self.id}: headcount {headcount} outside feasible range "
                f"[{self.lowest_headcount}, {self.highest_headcount}]")
        return self.rows[offset]


@dataclass(frozen=True)
class Solution:
    model:            WorkforceModel
    stages:           List[Stage]          # solved, chronological order
    path:             Tuple[int, ...]
    incremental_cost: Tuple[float, ...]
    interpretation:   Tuple[str, ...]

    @property
    def total_cost(self) -> float:
        return float(sum(self.incremental_cost))

    @property
    def max_demand(self) -> int:
        return self.model.max_demand


# ══════════════════════════════════════════════════════════════════════════════
# VALIDATION
# ══════════════════════════════════════════════════════════════════════════════
def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def model_violations(model: WorkforceModel) -> List[str]:
    """
    Every violated constraint class, in check order. Empty means valid.
    Range checks skip fields of the wrong type; those are reported last.
    """
    violations = []
    demand     = list(model.demand_per_period)

    if model.horizon_length != len(demand):
        violations.append(
            f"horizon_length ({model.horizon_length}) must equal the number of "
            f"demand values ({len(demand)})")
    if _is_int(model.horizon_length) and model.horizon_length < 1:
        violations.append("horizon_length must be at least 1")

    costs = {
        "excess_cost_per_unit": model.excess_cost_per_unit,
        "hire_fixed_cost":      model.hire_fixed_cost,
        "hire_per_unit_cost":   model.hire_per_unit_cost,
        "fire_cost_per_unit":   model.fire_cost_per_unit,
    }
    negative = [name for name, v in costs.items() if _is_real(v) and not v >= 0]
    if negative:
        violations.append("costs must be non-negative: " + ", ".join(negative))

    if _is_real(model.initial_headcount) and not model.initial_headcount >= 0:
        violations.append("initial_headcount must be non-negative")
    if _is_real(model.attrition_per_period) and not model.attrition_per_period >= 0:
        violations.append("attrition_per_period must be non-negative")
    if any(_is_real(d) and not d >= 0 for d in demand):
        violations.append("every demand value must be non-negative")

    not_real = [name for name, v in costs.items() if not _is_real(v)]
    if not_real:
        violations.append("costs must be real numbers: " + ", ".join(not_real))

    headcounts = [model.horizon_length, model.initial_headcount,
                  model.attrition_per_period] + demand
    if not all(_is_int(v) for v in headcounts):
        violations.append("horizon, headcounts, attrition and demands must be integers")

    return violations


def validate_model(model: WorkforceModel) -> bool:
    return not model_violations(model)


def check_model(model: WorkforceModel) -> None:
    violations = model_violations(model)
    if violations:
        logger.warning("Rejected workforce model: %s", "; ".join(violations))
        raise InvalidModelError(violations)


# ══════════════════════════════════════════════════════════════════════════════
# STAGE SPACE
# ══════════════════════════════════════════════════════════════════════════════
def build_stages(model: WorkforceModel) -> List[Stage]:
    """
    One Stage per period, chronological.

    Period 0 can only inherit the initial headcount. Any later period inherits
    what was chosen for the period before it, and a choice is never below that
    period's demand nor above the peak demand, so the feasible range is
    [demand[i-1], max_demand].
    """
    max_demand = model.max_demand
    lo = hi    = model.initial_headcount
    stages: List[Stage] = []

    for stage_id, demand in enumerate(model.demand_per_period):
        rows = [StageRow(previous_headcount=prev) for prev in range(lo, hi + 1)]
        stages.append(Stage(id=stage_id, minimum_demand=demand, rows=rows))
        lo, hi = demand, max_demand

    return stages


# ══════════════════════════════════════════════════════════════════════════════
# BACKWARD RECURRENCE
# ══════════════════════════════════════════════════════════════════════════════
def solve_stage(stage: Stage, next_stage: Optional[Stage], model: WorkforceModel,
                max_demand: int, config: SolverConfig) -> None:
    """
    Fill f and x on every row of stage, given the already-solved next stage
    (None for the last period, where the cost-to-go is zero).
    """
    minimum = stage.minimum_demand
    c_excess = model.excess_cost_per_unit
    c_fixed  = model.hire_fixed_cost
    c_hire   = model.hire_per_unit_cost
    c_fire   = config.fire_cost(model, stage.id)

    candidates = np.arange(minimum, max_demand + 1)
    if next_stage is None:
        cost_to_go = np.zeros(len(candidates))
    else:
        cost_to_go = np.array([next_stage.row_for(int(b)).optimal_cost for b in candidates],
                              dtype=float)
    excess = c_excess * (candidates - minimum)

    for row in stage.rows:
        # Voluntary leavers are gone before the decision; may go negative
        eff_x = row.previous_headcount - model.attrition_per_period

        hiring = np.where(candidates > eff_x, c_fixed + c_hire * (candidates - eff_x), 0.0)
        firing = np.where(candidates < eff_x, c_fire * (eff_x - candidates), 0.0)
        totals = excess + hiring + firing + cost_to_go

        # argmin returns the first minimum, i.e. the smallest headcount on ties
        best = int(np.argmin(totals))
        row.candidate_costs   = [CostOption(int(b), float(v)) for b, v in zip(candidates, totals)]
        row.optimal_cost      = float(totals[best])
        row.optimal_headcount = int(candidates[best])

    logger.debug("Solved stage %d (demand %d): %d rows x %d candidates",
                 stage.id, minimum, len(stage.rows), len(candidates))


def solve_stages(stages: List[Stage], model: WorkforceModel,
                 config: SolverConfig) -> None:
    """Solve every stage last period first; stage s needs stage s+1 solved."""
    max_demand = model.max_demand
    next_stage: Optional[Stage] = None
    for stage in reversed(stages):
        solve_stage(stage, next_stage, model, max_demand, config)
        next_stage = stage


# ══════════════════════════════════════════════════════════════════════════════
# FORWARD RECONSTRUCTION
# ══════════════════════════════════════════════════════════════════════════════
def interpret(previous_x: int, x: int) -> str:
    if x < previous_x:
        return f"Fire {previous_x - x} employees"
    if x > previous_x:
        return f"Hire {x - previous_x} employees"
    return "No change"


def reconstruct_path(stages: Sequence[Stage]) -> Tuple[List[int], List[float], List[str]]:
    """
    Walk solved stages chronologically from the initial headcount.
    Returns (path, incremental_cost, interpretation).
    """
    path:           List[int]   = []
    cost:           List[float] = []
    interpretation: List[str]   = []

    chosen = stages[0].lowest_headcount    # stage 0 holds only the initial headcount
    for i, stage in enumerate(stages):
        row = stage.row_for(chosen)
        chosen = row.optimal_headcount

        cost_to_go = stages[i + 1].row_for(chosen).optimal_cost if i + 1 < len(stages) else 0.0
        path.append(chosen)
        cost.append(row.optimal_cost - cost_to_go)
        interpretation.append(interpret(row.previous_headcount, chosen))

    return path, cost, interpretation


# ══════════════════════════════════════════════════════════════════════════════
# SOLVE
# ══════════════════════════════════════════════════════════════════════════════
def solve(model: WorkforceModel, config: Optional[SolverConfig] = None) -> Solution:
    """
    Validate, build, solve backward, reconstruct forward.
    Raises InvalidModelError before any work if the model is invalid.
    """
    if config is None:
        config = SolverConfig()
    check_model(model)

    stages = build_stages(model)
    solve_stages(stages, model, config)
    path, cost, interpretation = reconstruct_path(stages)

    solution = Solution(
        model=model,
        stages=stages,
        path=tuple(path),
        incremental_cost=tuple(cost),
        interpretation=tuple(interpretation),
    )
    logger.info("Solved %d-%s horizon (peak demand %d): total cost %.2f",
                model.horizon_length, model.time_unit, model.max_demand,
                solution.total_cost)
    return solution
