"""Factory functions for creating tool instances from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cvmatch_agents.tools.email_sender import EmailSender
from cvmatch_core.interfaces.embedder import EmbedderBase

if TYPE_CHECKING:
    from cvmatch_core.config.settings import Settings
    from cvmatch_core.interfaces.cache import CacheClient


def create_embedder(settings: Settings, cache: CacheClient | None = None) -> EmbedderBase:
    """Create an embedder based on settings.

    Returns ``VoyageEmbedder`` when ``settings.embedding_provider == "voyage"``,
    otherwise the local sentence-transformers model. When ``cache`` is given
    the embedder is wrapped in ``CachedEmbedder``.
    """
    from cvmatch_agents.tools.embedder import (
        VOYAGE_MODEL,
        CachedEmbedder,
        LocalEmbedder,
        VoyageEmbedder,
    )

    embedder: EmbedderBase
    if settings.embedding_provider == "voyage" and settings.voyage_api_key:
        embedder = VoyageEmbedder(api_key=settings.voyage_api_key.get_secret_value())
        namespace = f"voyage:{VOYAGE_MODEL}:{settings.embedding_dimension}"
    else:
        embedder = LocalEmbedder(model_name=settings.embedding_model)
        namespace = f"local:{settings.embedding_model}:{settings.embedding_dimension}"

    if cache is None:
        return embedder
    return CachedEmbedder(
        embedder,
        cache,
        ttl_seconds=settings.cache_ttl_hours * 3600,
        namespace=namespace,
    )


def create_email_sender(settings: Settings) -> EmailSender:
    """Create an EmailSender configured for SMTP or SendGrid."""
    return EmailSender(
        provider=settings.email_provider,
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        smtp_user=settings.smtp_user,
        smtp_password=(
            settings.smtp_password.get_secret_value() if settings.smtp_password else ""
        ),
        sendgrid_api_key=(
            settings.sendgrid_api_key.get_secret_value() if settings.sendgrid_api_key else ""
        ),
        from_email=settings.email_from,
    )
