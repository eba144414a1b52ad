"""Simulated annealing for closed tours over a point set."""

from .errors import ConfigurationError, InputShapeError, PreconditionError
from .problem import GenerationMethod, Problem, TSP
from .sa import (
    AnnealingResult,
    RunStatus,
    Scheduler,
    TraceEntry,
    p_accept,
    simulated_annealing,
    solve,
)
from .setup import AnnealingConfig, load_config, parse_config
from .utils import calculate_distance_matrix

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "InputShapeError",
    "PreconditionError",
    "GenerationMethod",
    "Problem",
    "TSP",
    "AnnealingResult",
    "RunStatus",
    "Scheduler",
    "TraceEntry",
    "p_accept",
    "simulated_annealing",
    "solve",
    "AnnealingConfig",
    "load_config",
    "parse_config",
    "calculate_distance_matrix",
]
