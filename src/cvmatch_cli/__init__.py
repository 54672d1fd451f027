"""Command line interface for cvmatch."""
