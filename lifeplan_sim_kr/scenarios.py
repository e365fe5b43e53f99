"""Scenario definitions and multi-scenario execution."""

import dataclasses

from lifeplan_sim_kr.params import Assumptions, Profile
from lifeplan_sim_kr.rates import AVERAGE, OPTIMISTIC, PESSIMISTIC
from lifeplan_sim_kr.simulation import SimulationResult, simulate

SCENARIO_ORDER = (OPTIMISTIC, AVERAGE, PESSIMISTIC)


def run_scenarios(
    profile: Profile,
    items,
    assumptions: Assumptions | None = None,
    rules=(),
    modes=SCENARIO_ORDER,
    **kwargs,
) -> dict[str, SimulationResult]:
    """Execute one simulation per scenario mode.

    The household's own assumptions are kept except for scenario_mode.
    kwargs are passed through to simulate (start_year, initial_cash, ...).
    """
    if assumptions is None:
        assumptions = Assumptions()
    all_results = {}
    for mode in modes:
        scenario = dataclasses.replace(assumptions, scenario_mode=mode)
        all_results[mode] = simulate(profile, items, scenario, rules, **kwargs)
    return all_results
