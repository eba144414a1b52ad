import torch


def _random_pair(n: int, min_gap: int, generator: torch.Generator):
    """Draw two positions in [0, n) until |i - j| >= min_gap."""
    while True:
        i, j = torch.randint(
            0, n, (2,), generator=generator, device=generator.device
        ).tolist()
        if abs(i - j) >= min_gap:
            return i, j


def swap(solution: torch.Tensor, generator: torch.Generator) -> torch.Tensor:
    """
    Swap two nodes in the tour.

    Args:
        solution: Tensor [num_nodes] holding a permutation of node indices
        generator: Random source of the run

    Returns:
        New tour with two distinct positions exchanged
    """
    sol = solution.clone()
    idx1, idx2 = _random_pair(sol.size(0), 1, generator)

    temp = sol[idx1].clone()
    sol[idx1] = sol[idx2]
    sol[idx2] = temp

    return sol


def reverse(solution: torch.Tensor, generator: torch.Generator) -> torch.Tensor:
    """
    Perform 2-opt move by reversing the segment between two positions.

    Args:
        solution: Tensor [num_nodes]
        generator: Random source of the run

    Returns:
        Tour with the closed segment [left, right] reversed
    """
    # The endpoints are at least two positions apart so the reversed
    # segment always holds three or more nodes.
    i, j = _random_pair(solution.size(0), 2, generator)
    left, right = min(i, j), max(i, j)
    sol = solution.clone()
    sol[left : right + 1] = torch.flip(solution[left : right + 1], dims=(0,))
    return sol


def insertion(
    solution: torch.Tensor, generator: torch.Generator, legacy: bool = True
) -> torch.Tensor:
    """
    Move a node to a new position in the tour.

    In legacy mode the tour is returned unchanged, which reproduces the
    behaviour of the reference solver where insertion was never written.

    Args:
        solution: Tensor [num_nodes]
        generator: Random source of the run
        legacy: Keep the no-op behaviour

    Returns:
        New tour tensor
    """
    if legacy:
        return solution.clone()

    node_pos, new_pos = _random_pair(solution.size(0), 1, generator)
    remaining = torch.cat([solution[:node_pos], solution[node_pos + 1 :]])
    return torch.cat(
        [remaining[:new_pos], solution[node_pos : node_pos + 1], remaining[new_pos:]]
    )


def k_opt(
    solution: torch.Tensor, k: int, generator: torch.Generator, legacy: bool = True
) -> torch.Tensor:
    """
    Cut the tour in k places and reconnect the inner segments.

    The k cuts split the tour into k + 1 segments. The first and the last
    segment stay in place; the k - 1 inner segments are shuffled and each
    one is reversed with probability 1/2 (always, when there is only one).
    Draws that reproduce the input tour are discarded. In legacy mode the
    tour is returned unchanged.

    Args:
        solution: Tensor [num_nodes]
        k: Number of edges removed
        generator: Random source of the run
        legacy: Keep the no-op behaviour

    Returns:
        New tour tensor
    """
    if legacy:
        return solution.clone()

    n = solution.size(0)
    device = generator.device
    while True:
        # Cut c means an edge between positions c - 1 and c
        cuts = (
            torch.randperm(n - 1, generator=generator, device=device)[:k]
            .add(1)
            .sort()
            .values
        )
        bounds = [0] + cuts.tolist() + [n]
        segments = [
            solution[bounds[s] : bounds[s + 1]] for s in range(len(bounds) - 1)
        ]

        inner = segments[1:-1]
        order = torch.randperm(
            len(inner), generator=generator, device=device
        ).tolist()
        flips = (
            torch.rand(len(inner), generator=generator, device=device) < 0.5
        ).tolist()
        if len(inner) == 1:
            # A lone segment can only change by reversal
            flips = [True]
        moved = [
            torch.flip(inner[o], dims=(0,)) if flips[pos] else inner[o]
            for pos, o in enumerate(order)
        ]
        candidate = torch.cat([segments[0], *moved, segments[-1]])
        if not torch.equal(candidate, solution):
            return candidate
