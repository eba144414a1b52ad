# Import key modules for the Simulated Annealing package
from .annealing import (
    AnnealingResult,
    RunStatus,
    TraceEntry,
    metropolis_accept,
    p_accept,
    simulated_annealing,
    solve,
)
from .scheduler import COOLING_METHODS, Scheduler

__all__ = [
    "AnnealingResult",
    "RunStatus",
    "TraceEntry",
    "metropolis_accept",
    "p_accept",
    "simulated_annealing",
    "solve",
    "COOLING_METHODS",
    "Scheduler",
]
