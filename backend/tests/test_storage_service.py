"""
Tests unitaires pour le stockage des cartes d'identité (client S3 mocké).
"""

import io
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from app.services import storage_service
from app.services.storage_service import StorageError, build_object_key, upload_id_card


@pytest.fixture
def s3_settings():
    with patch.object(storage_service.settings, "S3_PUBLIC_BASE_URL", "https://files.janaojana.in/"), \
            patch.object(storage_service.settings, "S3_BUCKET_NAME", "registrations"), \
            patch.object(storage_service.settings, "ID_CARD_PREFIX", "id-cards"):
        yield


def test_cle_horodatee(s3_settings):
    now = datetime(2025, 8, 14, 10, 15, 12, 123456, tzinfo=timezone.utc)
    assert build_object_key("carte élève.pdf", now=now) == "id-cards/20250814T101512123456-carte_l_ve.pdf"


def test_cle_sans_chemin(s3_settings):
    key = build_object_key("../../etc/passwd")
    assert key.startswith("id-cards/")
    assert "/" not in key[len("id-cards/"):]


def test_upload_retourne_url_publique(s3_settings):
    client = MagicMock()
    with patch("app.services.storage_service._get_client", return_value=client):
        url = upload_id_card(io.BytesIO(b"data"), "card.png", "image/png")

    args, kwargs = client.upload_fileobj.call_args
    key = args[2]
    assert args[1] == "registrations"
    assert kwargs["ExtraArgs"] == {"ContentType": "image/png"}
    assert url == f"https://files.janaojana.in/{key}"


def test_upload_echec(s3_settings):
    client = MagicMock()
    client.upload_fileobj.side_effect = Exception("connection reset")
    with patch("app.services.storage_service._get_client", return_value=client):
        with pytest.raises(StorageError):
            upload_id_card(io.BytesIO(b"data"), "card.png", "image/png")


def test_stockage_non_configure():
    with patch.object(storage_service.settings, "S3_PUBLIC_BASE_URL", ""):
        with pytest.raises(StorageError):
            upload_id_card(io.BytesIO(b"data"), "card.png", "image/png")


def test_creation_client_echouee(s3_settings):
    """Une erreur de boto3 à la création du client devient StorageError."""
    with patch("app.services.storage_service._get_client", side_effect=ValueError("Invalid endpoint: x")):
        with pytest.raises(StorageError):
            upload_id_card(io.BytesIO(b"data"), "card.png", "image/png")
