"""Tests for chart generation."""

import pytest
from lifeplan_sim_kr import Expense, Income, Profile, run_scenarios, simulate
from lifeplan_sim_kr.charts import plot_cashflow, plot_scenario_comparison, plot_trajectory


def _run():
    profile = Profile(birth_year=1980, retirement_age=60)
    items = [
        Income(id="salary", amount=400, until_retirement=True),
        Expense(id="living", amount=300),
    ]
    return profile, items


class TestCharts:
    def test_trajectory(self, tmp_path):
        profile, items = _run()
        result = simulate(profile, items, start_year=2025, years=20)
        path = plot_trajectory(result, tmp_path)
        assert path == tmp_path / "trajectory.png"
        assert path.exists()

    def test_cashflow_with_name(self, tmp_path):
        profile, items = _run()
        result = simulate(profile, items, start_year=2025, years=5)
        path = plot_cashflow(result, tmp_path / "out", name="a")
        assert path.name == "cashflow-a.png"
        assert path.exists()

    def test_scenarios(self, tmp_path):
        profile, items = _run()
        path = plot_scenario_comparison(run_scenarios(profile, items, start_year=2025, years=10), tmp_path)
        assert path.exists()

    def test_empty_scenarios(self, tmp_path):
        with pytest.raises(ValueError):
            plot_scenario_comparison({}, tmp_path)
