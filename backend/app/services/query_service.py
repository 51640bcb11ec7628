"""
Service de consultation des inscriptions pour l'administration.

- list_registrations : tableau paginé, filtré (texte, classe, présence, certificat) et trié
- search_registrations : recherche rapide de la page de pointage des présences
"""

import math
import logging
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.models.registration import Registration
from app.schemas.registration import RegistrationPage, RegistrationResponse
from app.services.registration_service import to_response

logger = logging.getLogger(__name__)

# Champs JSON triables → colonnes
SORT_FIELDS = {
    "studentName": Registration.student_name,
    "schoolName": Registration.school_name,
    "class": Registration.class_name,
    "dob": Registration.dob,
    "email": Registration.email,
    "mobileNumber": Registration.mobile_number,
    "altMobileNumber": Registration.alt_mobile_number,
    "createdAt": Registration.created_at,
    "isAttended": Registration.is_attended,
    "certificateIssued": Registration.certificate_issued,
}

SEARCH_RESULT_LIMIT = 50


def _contains(column, text: str):
    """Sous-chaîne insensible à la casse ; % et _ de la saisie sont pris littéralement."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


def list_registrations(
    db: Session,
    page: int = 1,
    limit: int = 10,
    search: str = "",
    class_filter: str = "",
    sort_by: str = "studentName",
    sort_order: str = "asc",
    is_attended: Optional[bool] = None,
    certificate_issued: Optional[bool] = None,
) -> RegistrationPage:
    """
    Retourne une page d'inscriptions.

    Règles :
    - search : nom, école ou email contenant le texte (insensible à la casse)
    - class_filter : classe exacte
    - sort_by inconnu → ValueError
    - totalPages = ceil(total / limit), 0 si aucun résultat
    """
    sort_column = SORT_FIELDS.get(sort_by)
    if sort_column is None:
        raise ValueError(f"Invalid sort field '{sort_by}'. Allowed: {', '.join(SORT_FIELDS)}")

    conditions = []
    search = (search or "").strip()
    if search:
        conditions.append(or_(
            _contains(Registration.student_name, search),
            _contains(Registration.school_name, search),
            _contains(Registration.email, search),
        ))
    if class_filter:
        conditions.append(Registration.class_name == class_filter)
    if is_attended is not None:
        conditions.append(Registration.is_attended == is_attended)
    if certificate_issued is not None:
        conditions.append(Registration.certificate_issued == certificate_issued)

    total = db.execute(
        select(func.count()).select_from(Registration).where(*conditions)
    ).scalar() or 0

    ordering = sort_column.asc() if sort_order == "asc" else sort_column.desc()
    registrations = db.execute(
        select(Registration)
        .where(*conditions)
        .order_by(ordering, Registration.id)  # id : pages stables à égalité
        .offset((page - 1) * limit)
        .limit(limit)
    ).scalars().all()

    return RegistrationPage(
        registrations=[to_response(r) for r in registrations],
        total=total,
        page=page,
        total_pages=math.ceil(total / limit),
        limit=limit,
    )


def search_registrations(db: Session, query: str, limit: int = SEARCH_RESULT_LIMIT) -> List[RegistrationResponse]:
    """
    Recherche pour le pointage des présences : nom, école, numéro principal ou alternatif.
    Saisie vide → liste vide sans requête.
    """
    query = (query or "").strip()
    if not query:
        return []

    registrations = db.execute(
        select(Registration)
        .where(or_(
            _contains(Registration.student_name, query),
            _contains(Registration.school_name, query),
            _contains(Registration.mobile_number, query),
            _contains(Registration.alt_mobile_number, query),
        ))
        .order_by(Registration.student_name, Registration.id)
        .limit(limit)
    ).scalars().all()

    logger.debug("Recherche '%s' : %d résultat(s)", query, len(registrations))
    return [to_response(r) for r in registrations]
