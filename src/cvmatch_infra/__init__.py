"""Infrastructure layer: persistence, caching and vector math."""
