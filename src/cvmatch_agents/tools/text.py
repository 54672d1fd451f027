"""Text helpers shared by parsers and scoring engines."""

from __future__ import annotations

import re
import unicodedata
from difflib import SequenceMatcher

from cvmatch_core.constants import FRENCH_STOPWORDS

_QUOTES = str.maketrans({"’": "'", "‘": "'", "“": '"', "”": '"', " ": " "})
_EMBED_STRIP_RE = re.compile(r"[^\w\sàáâãäçèéêëìíîïñòóôõöùúûüýÿæœ]")
_WS_RE = re.compile(r"\s+")
_SPLIT_RE = re.compile(r"\W+")


def clean_text(text: str) -> str:
    """Normalize unicode, quotes and whitespace; keep line breaks."""
    text = unicodedata.normalize("NFC", text or "").translate(_QUOTES)
    lines = (" ".join(line.split()) for line in text.splitlines())
    return "\n".join(line for line in lines if line)


def preprocess_for_embedding(text: str, max_chars: int = 8000) -> str:
    """Lowercase, drop punctuation (French accents kept) and truncate."""
    processed = _EMBED_STRIP_RE.sub(" ", text.lower())
    processed = _WS_RE.sub(" ", processed).strip()
    if len(processed) > max_chars:
        processed = processed[:max_chars] + "..."
    return processed


def extract_keywords(text: str, limit: int = 50) -> list[str]:
    """Return distinct words longer than 3 chars that are not French stopwords."""
    seen: dict[str, None] = {}
    for word in _SPLIT_RE.split(text.lower()):
        if len(word) > 3 and word not in FRENCH_STOPWORDS and not word.isdigit():
            seen.setdefault(word, None)
    return list(seen)[:limit]


def string_similarity(a: str, b: str) -> float:
    """Case-insensitive similarity ratio in [0, 1]."""
    a, b = a.lower().strip(), b.lower().strip()
    if not a or not b:
        return 0.0
    return SequenceMatcher(None, a, b).ratio()


def contains_term(text: str, term: str) -> bool:
    """Case-insensitive substring test."""
    return term.lower() in text.lower()


def split_full_name(name: str | None, default: str) -> tuple[str, str]:
    """Split 'Prénom Nom Composé' into first name and the rest."""
    parts = (name or "").split()
    if not parts:
        return default, default
    if len(parts) == 1:
        return parts[0], default
    return parts[0], " ".join(parts[1:])


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance with unit insert, delete and substitute costs."""
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(current[j - 1] + 1, previous[j] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def term_similarity(a: str, b: str) -> float:
    """1.0 for equal terms, 0.8 when one contains the other, else normalized edit distance."""
    a, b = a.lower(), b.lower()
    if a == b:
        return 1.0
    if a in b or b in a:
        return 0.8
    longest = max(len(a), len(b))
    return 1.0 - levenshtein_distance(a, b) / longest
