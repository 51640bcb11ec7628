"""
Mise à jour des statuts d'une inscription : présence et remise du certificat.

Les deux indicateurs sont indépendants : un certificat peut être marqué remis
sans que la présence soit validée (comportement conservé, voir DESIGN.md).
"""

import uuid
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.models.registration import Registration

logger = logging.getLogger(__name__)


def _set_flag(db: Session, registration_id: uuid.UUID, field: str, value: bool) -> Optional[Registration]:
    registration = db.get(Registration, registration_id)
    if registration is None:
        return None

    setattr(registration, field, value)
    db.commit()
    logger.info("Inscription %s : %s = %s", registration_id, field, value)
    return registration


def set_attendance(db: Session, registration_id: uuid.UUID, is_attended: bool) -> Optional[Registration]:
    """Marque la présence. Retourne None si l'inscription n'existe pas."""
    return _set_flag(db, registration_id, "is_attended", is_attended)


def set_certificate_issued(db: Session, registration_id: uuid.UUID, issued: bool) -> Optional[Registration]:
    """Marque la remise du certificat. Retourne None si l'inscription n'existe pas."""
    return _set_flag(db, registration_id, "certificate_issued", issued)
