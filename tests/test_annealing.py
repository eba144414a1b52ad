import math

import pytest
import torch

from tsp_annealing import (
    GenerationMethod,
    PreconditionError,
    RunStatus,
    Scheduler,
    TSP,
    p_accept,
    simulated_annealing,
    solve,
)
from tsp_annealing.sa import metropolis_accept

from conftest import is_permutation_of, make_config


# --------------------------------
# Acceptance probability
# --------------------------------


def test_improving_move_probability_above_one():
    assert p_accept(0.5, 1.0) > 1.0
    assert p_accept(0.5, 1.0) == pytest.approx(math.exp(0.5))


def test_equal_cost_probability_is_one():
    assert p_accept(0.0, 3.0) == 1.0


def test_worse_move_probability_vanishes_when_cold():
    assert 0.0 < p_accept(-1.0, 10.0) < 1.0
    assert p_accept(-1.0, 1e-3) < 1e-300


def test_huge_gain_does_not_overflow():
    assert p_accept(1e6, 1e-6) == math.inf


def test_metropolis_accept_always_takes_p_at_least_one():
    generator = torch.Generator().manual_seed(0)
    assert all(metropolis_accept(1.0, generator) for _ in range(200))
    assert not any(metropolis_accept(0.0, generator) for _ in range(200))


# --------------------------------
# Loop
# --------------------------------


def test_unit_square_end_to_end(unit_square):
    config = make_config()
    result = solve(unit_square, config)

    assert result.status == RunStatus.EXHAUSTED
    assert result.iterations == config.max_iterations - 1
    assert sorted(result.tour.tolist()) == [0, 1, 2, 3]
    assert result.cost >= 4.0 - 1e-9
    assert result.best_cost <= result.cost


def test_unit_square_reaches_optimum_for_most_seeds(unit_square):
    costs = [solve(unit_square, make_config(seed=seed)).best_cost for seed in range(10)]
    assert sum(cost == pytest.approx(4.0) for cost in costs) >= 8


def test_trace_records_each_move(unit_square):
    config = make_config()
    result = solve(unit_square, config)
    scheduler = Scheduler(
        config.cooling_method, config.initial_temperature, config.temperature_decay
    )

    assert [entry.iteration for entry in result.trace] == list(range(1, 50))
    assert result.trace[0].temperature == config.initial_temperature
    for previous, entry in zip(result.trace, result.trace[1:]):
        assert entry.temperature == pytest.approx(scheduler.step(previous.iteration))
    for entry in result.trace:
        assert entry.probability == pytest.approx(
            math.exp(-entry.delta / entry.temperature)
        )
        if entry.delta <= 0:
            assert entry.accepted


def test_converges_when_temperature_crosses_minimum(unit_square):
    config = make_config(
        initial_temperature=1.0,
        minimum_temperature=0.1,
        temperature_decay=0.5,
        cooling_method="ExponentialMultiplicativeCooling",
        max_iterations=1000,
    )
    result = solve(unit_square, config)
    assert result.status == RunStatus.CONVERGED
    # 0.5, 0.25, 0.125 stay above 0.1; 0.0625 stops the loop
    assert result.iterations == 4


def test_initial_temperature_at_minimum_stops_immediately(unit_square):
    result = solve(unit_square, make_config(initial_temperature=1.0))
    assert result.status == RunStatus.CONVERGED
    assert result.iterations == 0
    assert torch.equal(result.tour, result.initial_tour)


def test_single_iteration_budget_evaluates_nothing(unit_square):
    result = solve(unit_square, make_config(max_iterations=1))
    assert result.status == RunStatus.EXHAUSTED
    assert result.trace == []


@pytest.mark.parametrize(
    "cooling_method,decay",
    [
        ("ExponentialMultiplicativeCooling", 0.99),
        ("LogarithmicMultiplicativeCooling", 3.0),
        ("LinearMultiplicativeCooling", 0.05),
        ("QuadraticMultiplicativeCooling", 0.001),
    ],
)
def test_terminates_within_budget(random_points, cooling_method, decay):
    config = make_config(
        cooling_method=cooling_method,
        temperature_decay=decay,
        minimum_temperature=0.5,
        max_iterations=300,
        generation_method=GenerationMethod.REVERSE,
    )
    result = solve(random_points, config)
    assert result.iterations <= config.max_iterations - 1
    assert result.status in (RunStatus.CONVERGED, RunStatus.EXHAUSTED)
    if result.status == RunStatus.CONVERGED:
        scheduler = Scheduler(cooling_method, 100.0, decay)
        assert scheduler.step(result.iterations) <= 0.5
    assert is_permutation_of(result.tour, torch.arange(12))


def test_time_limit_stops_the_run(random_points):
    result = solve(random_points, make_config(time_limit=1e-12, max_iterations=10**6))
    assert result.status == RunStatus.TIMED_OUT
    assert result.iterations == 0


def test_same_seed_same_run(random_points):
    config = make_config(generation_method=GenerationMethod.REVERSE, seed=42)
    first, second = solve(random_points, config), solve(random_points, config)
    assert torch.equal(first.tour, second.tour)
    assert first.trace == second.trace


def test_seed_argument_overrides_config(random_points):
    config = make_config(seed=1)
    a = solve(random_points, config, seed=99)
    b = solve(random_points, make_config(seed=99))
    assert torch.equal(a.initial_tour, b.initial_tour)


def test_final_cost_matches_final_tour(random_points):
    problem = TSP(random_points)
    problem.manual_seed(3)
    problem.set_heuristic(GenerationMethod.SWAP)
    result = simulated_annealing(problem, make_config())
    assert result.cost == pytest.approx(problem.cost(result.tour))
    assert result.best_cost == pytest.approx(problem.cost(result.best_tour))


@pytest.mark.parametrize(
    "method,k", [(GenerationMethod.INSERT, None), (GenerationMethod.KOPT, 3)]
)
def test_legacy_moves_leave_initial_tour(unit_square, method, k):
    config = make_config(generation_method=method, k=k, seed=5)
    result = solve(unit_square, config)

    reference = TSP(unit_square)
    reference.manual_seed(5)
    assert torch.equal(result.initial_tour, reference.generate_init_state())
    assert torch.equal(result.tour, result.initial_tour)
    assert all(entry.delta == 0 for entry in result.trace)


def test_extended_moves_change_the_tour(random_points):
    config = make_config(
        generation_method=GenerationMethod.KOPT, k=3, legacy_moves=False
    )
    result = solve(random_points, config)
    assert any(entry.delta != 0 for entry in result.trace)
    assert is_permutation_of(result.tour, torch.arange(12))


def test_positional_move_on_too_few_points():
    with pytest.raises(PreconditionError):
        solve([[0.0, 0.0], [1.0, 1.0]], make_config(generation_method="Reverse"))


@pytest.mark.skipif(not torch.cuda.is_available(), reason="needs a CUDA device")
@pytest.mark.parametrize("method,k", [("Swap", None), ("Reverse", None), ("Kopt", 3)])
def test_run_on_cuda_device(random_points, method, k):
    config = make_config(generation_method=method, k=k, legacy_moves=False)
    result = solve(random_points, config, device="cuda")
    assert result.tour.device.type == "cuda"
    assert is_permutation_of(result.tour.cpu(), torch.arange(12))


def test_metropolis_draw_uses_generator_device():
    generator = torch.Generator(device="cpu").manual_seed(0)
    assert metropolis_accept(1.0, generator)
    assert not metropolis_accept(0.0, generator)
