"""Matching pipeline orchestration."""
