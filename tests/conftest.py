import pytest
import torch

from tsp_annealing import AnnealingConfig, GenerationMethod

UNIT_SQUARE = [[0.0, 0.0], [0.0, 1.0], [1.0, 1.0], [1.0, 0.0]]


@pytest.fixture
def unit_square():
    return torch.tensor(UNIT_SQUARE, dtype=torch.float64)


@pytest.fixture
def random_points():
    generator = torch.Generator().manual_seed(1234)
    return torch.rand(12, 3, generator=generator, dtype=torch.float64)


def make_config(**overrides) -> AnnealingConfig:
    values = dict(
        initial_temperature=100.0,
        minimum_temperature=1.0,
        temperature_decay=0.1,
        max_iterations=50,
        generation_method=GenerationMethod.SWAP,
        cooling_method="LinearMultiplicativeCooling",
        seed=0,
    )
    values.update(overrides)
    return AnnealingConfig(**values)


def is_permutation_of(tour: torch.Tensor, reference: torch.Tensor) -> bool:
    return sorted(tour.tolist()) == sorted(reference.tolist())
