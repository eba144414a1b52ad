# --------------------------------
# Import required libraries
# --------------------------------
from abc import ABC, abstractmethod
from enum import Enum
from functools import partial
from typing import Callable, Dict, Optional

import torch
from loguru import logger

from .algo import swap, reverse, insertion, k_opt
from .errors import ConfigurationError, PreconditionError
from .utils import Points, as_points, calculate_distance_matrix


class GenerationMethod(str, Enum):
    """Neighbour moves understood by :meth:`TSP.set_heuristic`."""

    SWAP = "Swap"
    INSERT = "Insert"
    REVERSE = "Reverse"
    KOPT = "Kopt"


class Problem(ABC):
    """
    Abstract base class defining the interface for optimization problems.

    A problem owns its random generator so that every source of entropy of
    a run (initial state, moves, acceptance draws) comes from one seedable
    place.
    """

    def __init__(self, device: str = "cpu") -> None:
        """
        Initialize the problem.

        Args:
            device: Computation device (cpu/cuda)
        """
        self.device = device
        self.generator = torch.Generator(device=device)
        self.generator.seed()

    def manual_seed(self, seed: int) -> None:
        """
        Set random generator seed for reproducibility.

        Args:
            seed: Random seed value
        """
        self.generator = torch.Generator(device=self.device)
        self.generator.manual_seed(seed)

    @abstractmethod
    def cost(self, s: torch.Tensor) -> float:
        """
        Calculate cost of a solution.

        Args:
            s: Solution tensor

        Returns:
            Cost value
        """
        pass

    @abstractmethod
    def update(self, s: torch.Tensor) -> torch.Tensor:
        """
        Propose a neighbour of a solution.

        Args:
            s: Current solution tensor

        Returns:
            Candidate solution tensor
        """
        pass

    @abstractmethod
    def set_params(self, **kwargs) -> None:
        """
        Set problem parameters.

        Args:
            **kwargs: Problem-specific parameters
        """
        pass

    @abstractmethod
    def generate_init_state(self) -> torch.Tensor:
        """
        Generate initial state for the problem.

        Returns:
            Initial state tensor
        """
        pass


class TSP(Problem):
    """
    Symmetric Euclidean Travelling Salesman Problem on a fixed point set.

    A solution is a 1-D long tensor holding a permutation of the point
    indices, read as a cyclic visiting order.
    """

    def __init__(self, points: Optional[Points] = None, device: str = "cpu"):
        """
        Initialize TSP instance.

        Args:
            points: Coordinates [n, d]; can also be given later via set_params
            device: Computation device (cpu/cuda)
        """
        super().__init__(device)
        self.heuristic: Optional[Callable[..., torch.Tensor]] = None
        self.heuristic_name: Optional[str] = None
        if points is not None:
            self.set_params(points=points)

    # --------------------------------
    # Initialization and Configuration
    # --------------------------------

    def set_params(self, points: Points) -> None:
        """
        Store coordinates and compute the distance matrix once.

        Args:
            points: Coordinates [n, d]
        """
        self.coords = as_points(points).to(self.device)
        self.matrix = calculate_distance_matrix(self.coords)
        self.dim = self.coords.size(0)
        logger.debug(
            f"TSP instance with {self.dim} points of dimension {self.coords.size(1)}"
        )

    def set_heuristic(
        self,
        heuristic: GenerationMethod,
        k: Optional[int] = None,
        legacy: bool = True,
    ) -> None:
        """
        Configure the move used to propose neighbours.

        The minimum tour length of positional moves is checked here, once,
        so that their resampling loops always terminate.

        Args:
            heuristic: Move name ('Swap', 'Insert', 'Reverse', 'Kopt')
            k: Number of removed edges for 'Kopt'
            legacy: Keep Insert and k-opt as no-op moves

        Raises:
            ConfigurationError: If the move is unknown or k is missing
            PreconditionError: If the tour is too short for the move
        """
        try:
            heuristic = GenerationMethod(heuristic)
        except ValueError:
            raise ConfigurationError(f"Unsupported heuristic: {heuristic}")

        heuristics: Dict[GenerationMethod, Callable[..., torch.Tensor]] = {
            GenerationMethod.SWAP: swap,
            GenerationMethod.REVERSE: reverse,
            GenerationMethod.INSERT: partial(insertion, legacy=legacy),
        }
        if heuristic == GenerationMethod.KOPT:
            if k is None or k < 1:
                raise ConfigurationError(f"k-opt needs a positive k, got {k}")
            self.heuristic = partial(k_opt, k=k, legacy=legacy)
            self.heuristic_name = f"{k}-opt"
        else:
            self.heuristic = heuristics[heuristic]
            self.heuristic_name = heuristic.value

        required = self.min_tour_length(heuristic, k, legacy)
        if self.dim < required:
            raise PreconditionError(
                f"{self.heuristic_name} needs a tour of at least {required} "
                f"points, got {self.dim}"
            )

    @staticmethod
    def min_tour_length(
        heuristic: GenerationMethod, k: Optional[int] = None, legacy: bool = True
    ) -> int:
        """Smallest tour a move can be applied to."""
        if heuristic == GenerationMethod.SWAP:
            return 2
        if heuristic == GenerationMethod.REVERSE:
            return 3
        if legacy:
            return 1
        if heuristic == GenerationMethod.INSERT:
            return 2
        if k < 2:
            raise ConfigurationError(f"k-opt needs k >= 2 to move anything, got {k}")
        if k == 2:
            # The single inner segment must hold two nodes to be reversed
            return 4
        return k + 1

    # --------------------------------
    # Problem Instance Generation
    # --------------------------------

    def generate_init_state(self) -> torch.Tensor:
        """Uniformly random permutation of the point indices."""
        return torch.randperm(self.dim, generator=self.generator, device=self.device)

    # --------------------------------
    # Cost Calculation
    # --------------------------------

    def get_edge_lengths_in_tour(self, solution: torch.Tensor) -> torch.Tensor:
        """
        Distances between consecutive nodes, closing edge included.

        Args:
            solution: Tensor [num_nodes]

        Returns:
            Tensor [num_nodes] where entry i is D[s[i], s[i+1 mod n]]
        """
        next_nodes = torch.roll(solution, shifts=-1)
        return self.matrix[solution, next_nodes]

    def cost(self, solution: torch.Tensor) -> float:
        """
        Compute total cycle length for a tour.

        Args:
            solution: Tensor [num_nodes] representing the visiting order

        Returns:
            Sum of the edge lengths, last node back to the first included
        """
        return float(torch.sum(self.get_edge_lengths_in_tour(solution)))

    # --------------------------------
    # Solution Modification Heuristics
    # --------------------------------

    def update(self, solution: torch.Tensor) -> torch.Tensor:
        """
        Apply the configured move to a tour.

        Args:
            solution: Current tour tensor [num_nodes]

        Returns:
            Candidate tour, a permutation of the same indices
        """
        if self.heuristic is None:
            raise ValueError("Heuristic not properly configured.")
        return self.heuristic(solution, generator=self.generator)
