"""
Router d'autocomplétion des noms d'école.
"""

from fastapi import APIRouter, Query

from app.schemas.registration import SchoolSuggestions
from app.services.school_matcher import suggest_schools

router = APIRouter(prefix="/api/schools", tags=["Écoles"])


@router.get("/suggestions", response_model=SchoolSuggestions, summary="Suggérer des noms d'école")
def school_suggestions(
    q: str = "",
    include_input: bool = Query(False, alias="includeInput"),
):
    """
    Jusqu'à 5 écoles connues correspondant à la saisie (acronyme en majuscules ou
    correspondance approximative). includeInput=true place la saisie brute en tête.
    """
    return SchoolSuggestions(suggestions=suggest_schools(q, include_input=include_input))
