"""Async SQLAlchemy persistence for the workspace."""
