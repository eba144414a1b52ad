from .local_heuristics import swap, reverse, insertion, k_opt

__all__ = [
    "swap",
    "reverse",
    "insertion",
    "k_opt",
]
