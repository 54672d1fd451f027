"""LinkedIn profile parsing prompt template (v1)."""

from __future__ import annotations

LINKEDIN_PARSER_SYSTEM = """\
Tu analyses le texte d'un profil LinkedIn copié depuis le navigateur. Le texte \
contient du bruit (boutons, compteurs de relations, suggestions) qu'il faut ignorer.

<rules>
- headline : le titre affiché sous le nom
- about : la section « Infos » / « About »
- Une entrée d'expérience par poste, y compris plusieurs postes dans une même entreprise
- Les recommandations et validations ne sont pas des compétences supplémentaires
- N'invente rien
</rules>
"""

LINKEDIN_PARSER_USER = """\
<linkedin_profile>
{profile_text}
</linkedin_profile>

Extrais le profil structuré.
"""
