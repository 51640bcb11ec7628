"""
Service de stockage des cartes d'identité sur un stockage objet compatible S3
(Cloudflare R2 en production, AWS S3 accepté).

La clé de l'objet est horodatée : id-cards/20250814T101512123456-carte_eleve.pdf
L'URL publique est la concaténation de S3_PUBLIC_BASE_URL et de la clé.
"""

import logging
import re
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import BinaryIO, Optional

import boto3
from botocore.config import Config

from app.config import settings

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class StorageError(RuntimeError):
    """Stockage non configuré ou upload refusé par le fournisseur."""


@lru_cache(maxsize=1)
def _get_client():
    """Client S3 créé au premier upload (les tests n'ont pas besoin d'identifiants)."""
    if not settings.S3_BUCKET_NAME or not settings.S3_ACCESS_KEY_ID or not settings.S3_SECRET_ACCESS_KEY:
        raise StorageError("Object storage is not configured.")
    return boto3.client(
        "s3",
        region_name=settings.S3_REGION,
        endpoint_url=settings.S3_ENDPOINT_URL or None,
        aws_access_key_id=settings.S3_ACCESS_KEY_ID,
        aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


def build_object_key(filename: str, now: Optional[datetime] = None) -> str:
    """Construit la clé horodatée de l'objet à partir du nom de fichier d'origine."""
    now = now or datetime.now(timezone.utc)
    original = Path(filename or "id-card").name
    safe_name = _UNSAFE_CHARS.sub("_", original).strip("._") or "id-card"
    prefix = settings.ID_CARD_PREFIX.strip("/")
    return f"{prefix}/{now.strftime('%Y%m%dT%H%M%S%f')}-{safe_name}"


def build_public_url(key: str) -> str:
    """URL publique de l'objet (base publique configurée + clé)."""
    if not settings.S3_PUBLIC_BASE_URL:
        raise StorageError("S3_PUBLIC_BASE_URL is not configured.")
    return f"{settings.S3_PUBLIC_BASE_URL.rstrip('/')}/{key}"


def upload_id_card(fileobj: BinaryIO, filename: str, content_type: str) -> str:
    """
    Envoie la carte d'identité dans le bucket et retourne son URL publique.
    Lève StorageError si le stockage n'est pas configuré ou si l'upload échoue.
    """
    key = build_object_key(filename)
    public_url = build_public_url(key)

    try:
        # boto3 lève ValueError sur un endpoint invalide
        client = _get_client()
        client.upload_fileobj(
            fileobj,
            settings.S3_BUCKET_NAME,
            key,
            ExtraArgs={"ContentType": content_type},
        )
    except StorageError:
        raise
    except Exception as exc:
        logger.error("Échec de l'upload de la carte %s : %s", key, exc)
        raise StorageError("ID card upload failed.") from exc

    logger.info("Carte d'identité stockée : %s", key)
    return public_url
