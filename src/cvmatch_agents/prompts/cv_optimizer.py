"""Sector-specific CV rewriting prompt templates (v1)."""

from __future__ import annotations

from typing import TypedDict


class SectorPrompt(TypedDict):
    """Rewriting guidance for one sector."""

    system_prompt: str
    cultural_guidance: str
    terminology: list[str]


SECTOR_PROMPTS: dict[str, SectorPrompt] = {
    "tech": {
        "system_prompt": (
            "Vous êtes un expert en recrutement tech français. Adaptez ce CV pour "
            "maximiser ses chances sur le marché français en respectant les codes "
            "culturels locaux."
        ),
        "cultural_guidance": (
            "- Privilégiez la précision à l'auto-promotion excessive\n"
            "- Utilisez un ton professionnel mais pas ostentatoire\n"
            "- Mettez l'accent sur les réalisations concrètes et mesurables\n"
            "- Respectez les conventions CV françaises (format, longueur)"
        ),
        "terminology": [
            "Expérience professionnelle",
            "Compétences techniques",
            "Formation",
            "Réalisations",
            "Projets",
            "Certifications",
            "Langues",
        ],
    },
    "finance": {
        "system_prompt": (
            "Vous êtes un expert en recrutement financier français. Adaptez ce CV "
            "selon les standards de la finance française."
        ),
        "cultural_guidance": (
            "- Soulignez la rigueur et la conformité réglementaire\n"
            "- Mettez en avant les certifications financières françaises (AMF, etc.)\n"
            "- Soulignez l'expérience avec les institutions françaises\n"
            "- Utilisez la terminologie financière française appropriée"
        ),
        "terminology": [
            "Analyse financière",
            "Gestion des risques",
            "Conformité",
            "Réglementation",
            "Contrôle de gestion",
            "Audit",
        ],
    },
}

DEFAULT_SECTOR_PROMPT = "tech"

CV_OPTIMIZER_SYSTEM = """\
{system_prompt}

<cultural_guidance>
{cultural_guidance}
</cultural_guidance>

<rules>
- N'invente aucune expérience, aucun diplôme, aucune compétence
- Reformulez et réorganisez l'existant pour mieux répondre à l'offre
- Intégrez naturellement les mots-clés manquants quand le parcours les justifie
- Utilisez ces intitulés de section : {terminology}
- Rédigez en français
</rules>
"""

CV_OPTIMIZER_USER = """\
<job_posting>
{job_text}
</job_posting>

<current_cv score="{score_percent}%">
{cv_text}
</current_cv>

<missing_keywords>
{missing_keywords}
</missing_keywords>

Tentative {attempt} sur {max_attempts}. Réécrivez le CV complet pour améliorer \
sa correspondance avec l'offre, et listez brièvement les changements.
"""


def sector_prompt(sector: str | None) -> SectorPrompt:
    """Return the prompt for a sector, defaulting to tech."""
    return SECTOR_PROMPTS.get(sector or DEFAULT_SECTOR_PROMPT, SECTOR_PROMPTS[DEFAULT_SECTOR_PROMPT])
