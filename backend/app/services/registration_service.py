"""
Service métier pour les inscriptions.
Gère l'inscription publique (avec carte d'identité), l'inscription centrale
sur place et la correction des coordonnées par un administrateur.
"""

import uuid
import logging
from typing import BinaryIO, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.registration import Registration
from app.schemas.registration import (
    CentralRegistrationCreate,
    RegistrationBase,
    RegistrationCreate,
    RegistrationResponse,
    RegistrationUpdate,
)
from app.services import storage_service

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "A registration for this student already exists."


class DuplicateRegistrationError(ValueError):
    """Inscription déjà existante pour le même élève (→ 409)."""

    def __init__(self, message: str = DUPLICATE_MESSAGE):
        super().__init__(message)


def find_duplicate(db: Session, data: RegistrationBase) -> Optional[Registration]:
    """
    Cherche une inscription existante pour le même élève.
    Nom et école comparés sans tenir compte de la casse ; classe et date de naissance exactes.
    """
    return _find_identity(db, data.student_name, data.school_name, data.class_name.value, data.dob)


def _find_identity(db: Session, student_name, school_name, class_name, dob, exclude_id=None):
    query = select(Registration).where(
        func.lower(Registration.student_name) == student_name.lower(),
        func.lower(Registration.school_name) == school_name.lower(),
        Registration.class_name == class_name,
        Registration.dob == dob,
    )
    if exclude_id is not None:
        query = query.where(Registration.id != exclude_id)
    return db.execute(query.limit(1)).scalars().first()


def register_participant(
    db: Session,
    data: RegistrationCreate,
    id_card: BinaryIO,
    filename: str,
    content_type: str,
) -> RegistrationResponse:
    """
    Inscription publique.

    Étapes :
    1. Vérifier l'absence de doublon (DuplicateRegistrationError sinon)
    2. Envoyer la carte d'identité au stockage objet (StorageError si échec)
    3. Insérer l'inscription avec l'URL de la carte
    """
    if find_duplicate(db, data) is not None:
        logger.info("Inscription en double refusée : %s (%s)", data.student_name, data.school_name)
        raise DuplicateRegistrationError()

    id_card_url = storage_service.upload_id_card(id_card, filename, content_type)
    return _insert(db, data, id_card_url=id_card_url, is_attended=False)


def create_central_registration(db: Session, data: CentralRegistrationCreate) -> RegistrationResponse:
    """Inscription sur place par un administrateur : pas de carte, présence déjà validée."""
    if find_duplicate(db, data) is not None:
        logger.info("Inscription centrale en double refusée : %s (%s)", data.student_name, data.school_name)
        raise DuplicateRegistrationError()
    return _insert(db, data, id_card_url=None, is_attended=True)


def update_registration(
    db: Session, registration_id: uuid.UUID, data: RegistrationUpdate
) -> Optional[RegistrationResponse]:
    """
    Corrige le nom et les numéros d'une inscription.
    Le numéro alternatif n'est modifié que s'il est fourni.
    Un renommage vers un élève déjà inscrit (même école, classe et date de naissance,
    casse ignorée) lève DuplicateRegistrationError.
    """
    registration = db.get(Registration, registration_id)
    if registration is None:
        return None

    clash = _find_identity(
        db,
        data.student_name,
        registration.school_name,
        registration.class_name,
        registration.dob,
        exclude_id=registration.id,
    )
    if clash is not None:
        logger.info("Renommage en doublon refusé : %s -> %s", registration.id, data.student_name)
        raise DuplicateRegistrationError()

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(registration, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateRegistrationError()
    db.refresh(registration)
    return to_response(registration)


def _insert(
    db: Session, data: RegistrationBase, id_card_url: Optional[str], is_attended: bool
) -> RegistrationResponse:
    registration = Registration(
        student_name=data.student_name,
        school_name=data.school_name,
        class_name=data.class_name.value,
        dob=data.dob,
        email=data.email,
        mobile_number=data.mobile_number,
        alt_mobile_number=data.alt_mobile_number,
        id_card_url=id_card_url,
        is_attended=is_attended,
        certificate_issued=False,
    )
    db.add(registration)
    try:
        db.commit()
    except IntegrityError:
        # Deux soumissions simultanées : la contrainte unique tranche
        db.rollback()
        if id_card_url:
            logger.warning("Carte orpheline après doublon concurrent : %s", id_card_url)
        raise DuplicateRegistrationError()
    db.refresh(registration)

    logger.info(
        "Inscription créée : %s (%s, classe %s), présence %s",
        registration.student_name, registration.id, registration.class_name, is_attended,
    )
    return to_response(registration)


def to_response(registration: Registration) -> RegistrationResponse:
    """Construit le schéma de réponse à partir du modèle SQLAlchemy."""
    return RegistrationResponse(
        id=registration.id,
        student_name=registration.student_name,
        school_name=registration.school_name,
        class_name=registration.class_name,
        dob=registration.dob,
        email=registration.email,
        mobile_number=registration.mobile_number,
        alt_mobile_number=registration.alt_mobile_number,
        id_card_url=registration.id_card_url,
        is_attended=bool(registration.is_attended),
        certificate_issued=bool(registration.certificate_issued),
        created_at=registration.created_at,
    )
