import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

import torch
from loguru import logger
from tqdm import tqdm

from ..problem import TSP
from ..utils import Points
from .scheduler import Scheduler

if TYPE_CHECKING:
    from ..setup.HP import AnnealingConfig


class RunStatus(str, Enum):
    RUNNING = "Running"
    CONVERGED = "Converged"
    EXHAUSTED = "Exhausted"
    TIMED_OUT = "TimedOut"


@dataclass(frozen=True)
class TraceEntry:
    """One proposed move: cost change, temperature used, p and decision."""

    iteration: int
    delta: float
    temperature: float
    probability: float
    accepted: bool


@dataclass
class AnnealingResult:
    tour: torch.Tensor
    cost: float
    initial_tour: torch.Tensor
    best_tour: torch.Tensor
    best_cost: float
    status: RunStatus
    trace: List[TraceEntry] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def iterations(self) -> int:
        return len(self.trace)

    @property
    def n_accepted(self) -> int:
        return sum(entry.accepted for entry in self.trace)


def p_accept(gain: float, temp: float) -> float:
    """
    Compute the Metropolis acceptance probability for a proposed move.

    Args:
        gain: Energy difference (current_cost - proposed_cost)
        temp: Current temperature, > 0

    Returns:
        exp(gain/temp), not clipped: an improving move gives a value > 1
    """
    return torch.exp(
        torch.tensor(gain, dtype=torch.float64) / temp
    ).item()


def metropolis_accept(acceptance_prob: float, generator: torch.Generator) -> bool:
    """Accept iff p > r with r drawn uniformly in [0, 1)."""
    random_sample = torch.rand(
        1, generator=generator, dtype=torch.float64, device=generator.device
    ).item()
    return acceptance_prob > random_sample


def simulated_annealing(
    problem: TSP,
    config: "AnnealingConfig",
    progress: bool = False,
    desc_tqdm: str = "Simulated Annealing Progress",
) -> AnnealingResult:
    """
    Run simulated annealing on a configured problem.

    The problem must already carry its move (set_heuristic) and its
    generator; every random draw of the run comes from problem.generator.
    The iteration counter starts at 1, so at most max_iterations - 1 moves
    are evaluated. After the move of iteration k the temperature is
    schedule(k), recomputed from the initial temperature.

    Args:
        problem: TSP instance with a heuristic set
        config: Run configuration
        progress: Show a tqdm progress bar
        desc_tqdm: Progress bar label

    Returns:
        AnnealingResult holding the last accepted tour and the trace
    """
    start = time.perf_counter()
    scheduler = Scheduler(
        config.cooling_method, config.initial_temperature, config.temperature_decay
    )

    # Initialize optimization tracking variables
    current_solution = problem.generate_init_state()
    initial_solution = current_solution.clone()
    current_cost = problem.cost(current_solution)
    best_solution, best_cost = current_solution, current_cost

    temperature = config.initial_temperature
    iteration = 1
    trace: List[TraceEntry] = []
    status = RunStatus.RUNNING

    logger.debug(
        f"Annealing {problem.dim} points with {problem.heuristic_name} / "
        f"{config.cooling_method}, T0={temperature}, initial cost={current_cost}"
    )

    with tqdm(
        total=max(config.max_iterations - 1, 0),
        desc=desc_tqdm,
        colour="green",
        unit="step",
        leave=False,
        disable=not progress,
    ) as pbar:
        while status == RunStatus.RUNNING:
            if temperature <= config.minimum_temperature:
                status = RunStatus.CONVERGED
                break
            if iteration >= config.max_iterations:
                status = RunStatus.EXHAUSTED
                break
            if (
                config.time_limit is not None
                and time.perf_counter() - start >= config.time_limit
            ):
                status = RunStatus.TIMED_OUT
                break

            proposed_solution = problem.update(current_solution)
            proposed_cost = problem.cost(proposed_solution)
            cost_improvement = current_cost - proposed_cost

            acceptance_prob = p_accept(cost_improvement, temperature)
            is_accepted = metropolis_accept(acceptance_prob, problem.generator)

            trace.append(
                TraceEntry(
                    iteration=iteration,
                    delta=-cost_improvement,
                    temperature=temperature,
                    probability=acceptance_prob,
                    accepted=is_accepted,
                )
            )

            if is_accepted:
                current_solution, current_cost = proposed_solution, proposed_cost
                if current_cost < best_cost:
                    best_solution, best_cost = current_solution, current_cost

            temperature = scheduler.step(iteration)
            iteration += 1
            pbar.update(1)

    result = AnnealingResult(
        tour=current_solution,
        cost=current_cost,
        initial_tour=initial_solution,
        best_tour=best_solution,
        best_cost=best_cost,
        status=status,
        trace=trace,
        elapsed=time.perf_counter() - start,
    )
    logger.info(
        f"{status.value} after {result.iterations} moves "
        f"({result.n_accepted} accepted), cost={result.cost:.6f}, "
        f"best={result.best_cost:.6f}"
    )
    return result


def solve(
    points: Points,
    config: "AnnealingConfig",
    progress: bool = False,
    device: str = "cpu",
    seed: Optional[int] = None,
) -> AnnealingResult:
    """
    Build the problem for a point set and anneal it.

    Args:
        points: Coordinates [n, d]
        config: Run configuration
        progress: Show a tqdm progress bar
        device: Computation device
        seed: Overrides config.seed when given

    Returns:
        AnnealingResult of the run
    """
    problem = TSP(points, device=device)
    seed = config.seed if seed is None else seed
    if seed is not None:
        problem.manual_seed(seed)
    problem.set_heuristic(
        config.generation_method, k=config.k, legacy=config.legacy_moves
    )
    return simulated_annealing(problem, config, progress=progress)
