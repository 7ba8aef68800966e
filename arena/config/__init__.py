"""Configuration package for the strategy arena.

Constants are grouped by concern (agents, interaction, evolution, world);
``simulation_config`` aggregates them into the dataclasses the World is
built from, and ``record`` handles the versioned export/import format.
"""
