"""
Tests unitaires pour le service d'inscription.
"""

import io
import uuid
from datetime import date
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from app.models.registration import Registration
from app.schemas.registration import (
    CentralRegistrationCreate,
    RegistrationCreate,
    RegistrationUpdate,
)
from app.services.registration_service import (
    DuplicateRegistrationError,
    create_central_registration,
    find_duplicate,
    register_participant,
    update_registration,
)
from app.services.storage_service import StorageError


# --- Helpers ---

def make_create(**overrides) -> RegistrationCreate:
    payload = {
        "studentName": "Anushka Das",
        "schoolName": "Delhi Public School Guwahati",
        "class": "IX",
        "dob": "2011-04-02",
        "mobileNumber": "9876543210",
    }
    payload.update(overrides)
    return RegistrationCreate(**payload)


def make_db_mock(duplicate=None):
    db = MagicMock()
    db.execute.return_value.scalars.return_value.first.return_value = duplicate
    return db


# --- register_participant (BDD mockée) ---

def test_inscription_doublon_refusee_sans_upload():
    db = make_db_mock(duplicate=MagicMock())
    with patch("app.services.registration_service.storage_service.upload_id_card") as upload:
        with pytest.raises(ValueError, match="already exists"):
            register_participant(db, make_create(), io.BytesIO(b"x"), "card.png", "image/png")
        upload.assert_not_called()
    db.add.assert_not_called()


def test_inscription_upload_puis_insertion():
    db = make_db_mock()
    with patch("app.services.registration_service.storage_service.upload_id_card") as upload, \
            patch("app.services.registration_service.to_response") as to_response:
        upload.return_value = "https://files.example.org/id-cards/card.png"
        to_response.return_value = MagicMock()

        register_participant(db, make_create(), io.BytesIO(b"x"), "card.png", "image/png")

        upload.assert_called_once()
        added = db.add.call_args[0][0]
        assert isinstance(added, Registration)
        assert added.id_card_url == "https://files.example.org/id-cards/card.png"
        assert added.is_attended is False
        assert added.certificate_issued is False
        assert added.class_name == "IX"
        db.commit.assert_called_once()


def test_inscription_echec_stockage_sans_insertion():
    db = make_db_mock()
    with patch("app.services.registration_service.storage_service.upload_id_card") as upload:
        upload.side_effect = StorageError("down")
        with pytest.raises(StorageError):
            register_participant(db, make_create(), io.BytesIO(b"x"), "card.png", "image/png")
    db.add.assert_not_called()


def test_inscription_doublon_concurrent():
    """La contrainte unique en BDD est traduite en ValueError (→ 409)."""
    db = make_db_mock()
    db.commit.side_effect = IntegrityError("duplicate", None, None)
    with patch("app.services.registration_service.storage_service.upload_id_card") as upload:
        upload.return_value = "https://files.example.org/id-cards/card.png"
        with pytest.raises(ValueError, match="already exists"):
            register_participant(db, make_create(), io.BytesIO(b"x"), "card.png", "image/png")
    db.rollback.assert_called_once()


# --- Avec base SQLite ---

def test_doublon_insensible_a_la_casse(db_session, make_registration):
    make_registration(student_name="Anushka Das", school_name="Delhi Public School Guwahati",
                      class_name="IX", dob=date(2011, 4, 2))
    data = make_create(studentName="ANUSHKA das", schoolName="delhi public school guwahati")
    assert find_duplicate(db_session, data) is not None


def test_pas_de_doublon_si_classe_differente(db_session, make_registration):
    make_registration(student_name="Anushka Das", class_name="X", dob=date(2011, 4, 2))
    assert find_duplicate(db_session, make_create()) is None


def test_inscription_centrale_presence_validee(db_session):
    data = CentralRegistrationCreate(
        studentName="Rahul Sharma",
        schoolName="Holy Child School",
        **{"class": "XI"},
        dob="2009-08-15",
        mobileNumber="9123456789",
        email="rahul.sharma@gmail.com",
    )
    result = create_central_registration(db_session, data)

    assert result.is_attended is True
    assert result.certificate_issued is False
    assert result.id_card_url is None
    stored = db_session.get(Registration, result.id)
    assert stored.is_attended is True
    assert stored.email == "rahul.sharma@gmail.com"


def test_inscription_centrale_doublon(db_session, make_registration):
    make_registration(student_name="Rahul Sharma", school_name="Holy Child School",
                      class_name="XI", dob=date(2009, 8, 15))
    data = CentralRegistrationCreate(
        studentName="Rahul Sharma",
        schoolName="Holy Child School",
        **{"class": "XI"},
        dob="2009-08-15",
        mobileNumber="9123456789",
        email="rahul.sharma@gmail.com",
    )
    with pytest.raises(ValueError):
        create_central_registration(db_session, data)


def test_mise_a_jour_coordonnees(db_session, make_registration):
    registration = make_registration(student_name="Rahul", alt_mobile_number="+91 9000000000")
    result = update_registration(
        db_session,
        registration.id,
        RegistrationUpdate(studentName="Rahul Sharma", mobileNumber="9111111111"),
    )
    assert result.student_name == "Rahul Sharma"
    assert result.mobile_number == "+91 9111111111"
    assert result.alt_mobile_number == "+91 9000000000"  # non fourni → inchangé


def test_mise_a_jour_inscription_inexistante(db_session):
    result = update_registration(
        db_session, uuid.uuid4(), RegistrationUpdate(studentName="X", mobileNumber="9111111111")
    )
    assert result is None


def test_renommage_vers_un_eleve_existant_refuse(db_session, make_registration):
    """Même règle qu'à l'inscription : nom comparé sans tenir compte de la casse."""
    make_registration(student_name="Anushka Das", class_name="IX", dob=date(2011, 4, 2))
    other = make_registration(student_name="Anushka D.", class_name="IX", dob=date(2011, 4, 2))

    with pytest.raises(DuplicateRegistrationError):
        update_registration(
            db_session, other.id, RegistrationUpdate(studentName="anushka das", mobileNumber="9111111111")
        )
    db_session.expire_all()
    assert db_session.get(Registration, other.id).student_name == "Anushka D."


def test_renommage_sur_soi_meme_accepte(db_session, make_registration):
    registration = make_registration(student_name="Anushka Das")
    result = update_registration(
        db_session, registration.id, RegistrationUpdate(studentName="ANUSHKA DAS", mobileNumber="9111111111")
    )
    assert result.student_name == "ANUSHKA DAS"
