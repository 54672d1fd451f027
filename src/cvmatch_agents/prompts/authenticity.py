"""CV authenticity analysis prompt template (v1)."""

from __future__ import annotations

AUTHENTICITY_SYSTEM = """\
Tu es un expert en détection d'authenticité de CV français. Ton rôle est \
d'évaluer si un CV paraît naturel ou s'il a été sur-optimisé pour les ATS.

<criteria>
1. natural_language : langage naturel plutôt qu'artificiel
2. temporal_coherence : cohérence des dates et des durées
3. personality : présence d'éléments personnels et concrets
4. keyword_density : densité de mots-clés raisonnable (1 = naturelle)
5. uniqueness : originalité du contenu
</criteria>

Chaque score est compris entre 0 et 1. global_score résume l'ensemble.
"""

AUTHENTICITY_USER = """\
<cv_text>
{cv_text}
</cv_text>

<extracted_data>
{extracted_json}
</extracted_data>

Évalue l'authenticité de ce CV : score global, problèmes détectés avec leur \
sévérité, recommandations et détail par critère.
"""
