"""
Statistiques du tableau de bord.
Calculées à chaque appel sur l'ensemble des inscriptions (pas d'agrégat incrémental).
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.registration import Registration
from app.schemas.stats import AttendanceStats, CertificateStats, StatsResponse

logger = logging.getLogger(__name__)


def percentage(count: int, total: int) -> int:
    """Pourcentage arrondi à l'entier (0,5 arrondi vers le haut) ; 0 si total nul."""
    if total <= 0:
        return 0
    return (200 * count + total) // (2 * total)


def compute_stats(db: Session) -> StatsResponse:
    """
    Parcourt toutes les inscriptions et calcule :
    - le nombre de participants et d'écoles distinctes (nom normalisé : minuscules, sans espaces autour)
    - la répartition par classe
    - les taux de présence et de remise des certificats
    """
    rows = db.execute(
        select(
            Registration.school_name,
            Registration.class_name,
            Registration.is_attended,
            Registration.certificate_issued,
        )
    ).all()

    total = len(rows)
    schools = set()
    class_counts: dict[str, int] = {}
    attended = 0
    issued = 0

    for school_name, class_name, is_attended, certificate_issued in rows:
        schools.add((school_name or "").strip().lower())
        class_counts[class_name] = class_counts.get(class_name, 0) + 1
        if is_attended:
            attended += 1
        if certificate_issued:
            issued += 1

    return StatsResponse(
        total_schools=len(schools),
        total_participants=total,
        class_counts=class_counts,
        attendance_stats=AttendanceStats(
            attended=attended,
            not_attended=total - attended,
            attendance_rate=percentage(attended, total),
        ),
        certificate_stats=CertificateStats(
            issued=issued,
            not_issued=total - issued,
            issuance_rate=percentage(issued, total),
        ),
    )
