"""Prompt templates for the matching agents."""
