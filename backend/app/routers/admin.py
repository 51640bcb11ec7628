"""
Router de l'espace d'administration.
Tableau des inscriptions, recherche de pointage, correction des coordonnées,
présence, remise des certificats, inscription centrale et statistiques.
"""

import uuid
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.registration import (
    AttendanceStatus,
    AttendanceUpdate,
    CentralRegistrationCreate,
    CertificateStatus,
    CertificateUpdate,
    MessageResponse,
    RegistrationCreated,
    RegistrationPage,
    RegistrationSearchResult,
    RegistrationUpdate,
)
from app.schemas.stats import StatsResponse
from app.services import query_service, registration_service, stats_service, status_service
from app.services.registration_service import DuplicateRegistrationError

router = APIRouter(prefix="/api/admin", tags=["Administration"])


@router.get("/registrations", response_model=RegistrationPage, summary="Lister les inscriptions")
def list_registrations(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=1000),
    search: str = "",
    class_filter: str = Query("", alias="class"),
    sort_by: str = Query("studentName", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("asc", alias="sortOrder"),
    is_attended: Optional[bool] = Query(None, alias="isAttended"),
    certificate_issued: Optional[bool] = Query(None, alias="certificateIssued"),
    db: Session = Depends(get_db),
):
    """
    Retourne une page d'inscriptions avec le total et le nombre de pages.
    search porte sur le nom, l'école et l'email ; class, isAttended et certificateIssued
    sont des filtres exacts.
    """
    try:
        return query_service.list_registrations(
            db,
            page=page,
            limit=limit,
            search=search,
            class_filter=class_filter,
            sort_by=sort_by,
            sort_order=sort_order,
            is_attended=is_attended,
            certificate_issued=certificate_issued,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get(
    "/registrations/search",
    response_model=RegistrationSearchResult,
    summary="Rechercher un participant (pointage)",
)
def search_registrations(q: str = "", db: Session = Depends(get_db)):
    """Recherche par nom, école ou numéro de téléphone, 50 résultats maximum."""
    return RegistrationSearchResult(registrations=query_service.search_registrations(db, q))


@router.patch("/registrations/{registration_id}", response_model=MessageResponse, summary="Corriger une inscription")
def update_registration(registration_id: uuid.UUID, data: RegistrationUpdate, db: Session = Depends(get_db)):
    """Met à jour le nom et les numéros de téléphone d'un participant."""
    try:
        result = registration_service.update_registration(db, registration_id, data)
    except DuplicateRegistrationError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if result is None:
        raise HTTPException(status_code=404, detail="Registration not found")
    return MessageResponse(message="Registration updated successfully")


@router.patch(
    "/registrations/{registration_id}/attendance",
    response_model=AttendanceStatus,
    summary="Marquer la présence",
)
def update_attendance(registration_id: uuid.UUID, data: AttendanceUpdate, db: Session = Depends(get_db)):
    registration = status_service.set_attendance(db, registration_id, data.is_attended)
    if registration is None:
        raise HTTPException(status_code=404, detail="Registration not found")
    return AttendanceStatus(message="Attendance status updated successfully", is_attended=data.is_attended)


@router.patch(
    "/registrations/{registration_id}/certificate",
    response_model=CertificateStatus,
    summary="Marquer la remise du certificat",
)
def update_certificate(registration_id: uuid.UUID, data: CertificateUpdate, db: Session = Depends(get_db)):
    registration = status_service.set_certificate_issued(db, registration_id, data.certificate_issued)
    if registration is None:
        raise HTTPException(status_code=404, detail="Registration not found")
    return CertificateStatus(
        message="Certificate status updated successfully",
        certificate_issued=data.certificate_issued,
    )


@router.post(
    "/central-register",
    response_model=RegistrationCreated,
    status_code=201,
    summary="Inscription centrale (sur place)",
)
def central_register(
    student_name: str = Form(..., alias="studentName"),
    school_name: str = Form(..., alias="schoolName"),
    class_name: str = Form(..., alias="class"),
    dob: str = Form(...),
    mobile_number: str = Form(..., alias="mobileNumber"),
    alt_mobile_number: Optional[str] = Form(None, alias="altMobileNumber"),
    email: str = Form(...),
    db: Session = Depends(get_db),
):
    """
    Inscrit un participant sur le lieu de l'épreuve.
    Pas de carte d'identité ; la présence est directement validée.
    """
    try:
        data = CentralRegistrationCreate.model_validate({
            "studentName": student_name,
            "schoolName": school_name,
            "class": class_name,
            "dob": dob,
            "mobileNumber": mobile_number,
            "altMobileNumber": alt_mobile_number,
            "email": email,
        })
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    try:
        registration = registration_service.create_central_registration(db, data)
    except DuplicateRegistrationError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return RegistrationCreated(
        message="Successfully registered! Participant marked as attended.",
        registration=registration,
    )


@router.get("/stats", response_model=StatsResponse, summary="Statistiques du concours")
def get_stats(db: Session = Depends(get_db)):
    """Participants, écoles distinctes, répartition par classe, taux de présence et de certificats."""
    return stats_service.compute_stats(db)
