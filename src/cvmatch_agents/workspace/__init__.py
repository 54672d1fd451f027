"""Workspace operations: clients, candidates, dossiers, invitations, dashboard."""

from cvmatch_agents.workspace.service import (
    WorkspaceService,
    calculate_completion_rate,
    map_dossier_status,
)

__all__ = ["WorkspaceService", "calculate_completion_rate", "map_dossier_status"]
