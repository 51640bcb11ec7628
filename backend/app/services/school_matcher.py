"""
Autocomplétion des noms d'école.

Deux sources de suggestions, fusionnées dans cet ordre :
1. Acronymes : si la saisie est entièrement en majuscules ("DPS"), les écoles dont
   l'acronyme commence par la saisie.
2. Correspondance approximative (difflib) : tolère les fautes de frappe et les saisies
   partielles ("don bosko" → "Don Bosco School Panbazar").
"""

import re
from difflib import SequenceMatcher
from typing import Iterable, List, Optional

from app.schools import KNOWN_SCHOOLS

STOP_WORDS = {"the", "for", "of", "and"}
FUZZY_THRESHOLD = 0.6
MIN_FUZZY_LENGTH = 2
DEFAULT_LIMIT = 5

_NON_LETTERS = re.compile(r"[^a-zA-Z]")
_WHITESPACE = re.compile(r"\s")


def get_acronym(school_name: str) -> str:
    """
    Calcule l'acronyme d'un nom d'école.
    Les mots vides sont ignorés ; un mot déjà en majuscules (IIT, CBSE) est conservé entier.
    """
    if not school_name:
        return ""
    parts = []
    for word in school_name.split():
        clean = _NON_LETTERS.sub("", word).lower()
        if not clean or clean in STOP_WORDS:
            continue
        if len(word) > 1 and word == word.upper():
            parts.append(word)
        else:
            parts.append(word[0])
    return "".join(parts).upper()


def _similarity(query: str, candidate: str) -> float:
    """Score entre 0 et 1 : meilleur ratio entre la chaîne complète et les fenêtres alignées sur les mots."""
    if query in candidate:
        return 1.0
    best = SequenceMatcher(None, query, candidate).ratio()
    size = len(query)
    starts = [0] + [m.end() for m in _WHITESPACE.finditer(candidate)]
    for start in starts:
        window = candidate[start:start + size]
        best = max(best, SequenceMatcher(None, query, window).ratio())
    return best


def fuzzy_matches(query: str, schools: Iterable[str], threshold: float = FUZZY_THRESHOLD) -> List[str]:
    """Écoles dont le score dépasse le seuil, meilleur score d'abord (ordre de la liste à égalité)."""
    needle = query.strip().lower()
    if len(needle) < MIN_FUZZY_LENGTH:
        return []

    scored = []
    for index, school in enumerate(schools):
        score = _similarity(needle, school.lower())
        if score >= threshold:
            scored.append((-score, index, school))
    scored.sort()
    return [school for _, _, school in scored]


def acronym_matches(query: str, schools: Iterable[str]) -> List[str]:
    """Écoles dont l'acronyme commence par la saisie (saisie en majuscules, 2 caractères min.)."""
    if len(query) <= 1 or query != query.upper():
        return []
    return [school for school in schools if get_acronym(school).startswith(query)]


def suggest_schools(
    query: str,
    schools: Optional[List[str]] = None,
    limit: int = DEFAULT_LIMIT,
    include_input: bool = False,
) -> List[str]:
    """
    Retourne au plus `limit` suggestions pour la saisie.

    Règles :
    - Saisie vide → aucune suggestion
    - Acronymes avant correspondances approximatives, sans doublon
    - La saisie elle-même (insensible à la casse) est retirée des suggestions
    - include_input : la saisie brute est placée en tête (inscription centrale,
      pour accepter une école absente de la liste)
    """
    if not query or not query.strip():
        return []
    if schools is None:
        schools = KNOWN_SCHOOLS

    combined = acronym_matches(query, schools) + fuzzy_matches(query, schools)

    seen = set()
    suggestions = []
    lowered_query = query.strip().lower()
    for school in combined:
        if school in seen or school.lower() == lowered_query:
            continue
        seen.add(school)
        suggestions.append(school)

    if include_input:
        suggestions.insert(0, query)
    return suggestions[:limit]
