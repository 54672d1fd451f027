"""Matching agents."""
