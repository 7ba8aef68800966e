"""Genetic operations for offspring.

There is no fitness function: agents that gather energy live long enough
to cross the reproduction threshold, and their traits and strategy spread.
"""

from arena.evolution.mutation import mutate_continuous_trait, mutate_strategy, mutate_traits

__all__ = ["mutate_continuous_trait", "mutate_strategy", "mutate_traits"]
