"""Repositories over the workspace tables."""

from cvmatch_infra.db.repositories.candidate_repo import CandidateRepository
from cvmatch_infra.db.repositories.client_repo import ClientRepository
from cvmatch_infra.db.repositories.dossier_repo import DossierRepository
from cvmatch_infra.db.repositories.invitation_repo import InvitationRepository
from cvmatch_infra.db.repositories.notification_repo import NotificationRepository

__all__ = [
    "CandidateRepository",
    "ClientRepository",
    "DossierRepository",
    "InvitationRepository",
    "NotificationRepository",
]
