"""Core domain layer: settings, models, protocols and shared constants."""
