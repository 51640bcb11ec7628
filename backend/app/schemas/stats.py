"""
Schémas Pydantic pour les statistiques du tableau de bord.
"""

from typing import Dict

from pydantic import BaseModel

from app.schemas.registration import CAMEL_CONFIG


class AttendanceStats(BaseModel):
    model_config = CAMEL_CONFIG

    attended: int
    not_attended: int
    attendance_rate: int  # pourcentage arrondi


class CertificateStats(BaseModel):
    model_config = CAMEL_CONFIG

    issued: int
    not_issued: int
    issuance_rate: int  # pourcentage arrondi


class StatsResponse(BaseModel):
    model_config = CAMEL_CONFIG

    total_schools: int
    total_participants: int
    class_counts: Dict[str, int]
    attendance_stats: AttendanceStats
    certificate_stats: CertificateStats
