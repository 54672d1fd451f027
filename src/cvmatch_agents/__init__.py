"""Agents, scoring engines, tools and orchestration for cvmatch."""
