"""
Modèle SQLAlchemy pour la table registrations (une ligne par participant).
L'attribut Python class_name est mappé sur la colonne `class` (mot-clé Python).
"""

import uuid
from sqlalchemy import Boolean, Column, Date, DateTime, String, UniqueConstraint, Uuid, func

from app.database import Base


class Registration(Base):
    __tablename__ = "registrations"
    __table_args__ = (
        # Un même élève (nom, école, classe, date de naissance) ne s'inscrit qu'une fois
        UniqueConstraint("student_name", "school_name", "class", "dob", name="uq_registration_identity"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_name = Column(String(150), nullable=False)
    school_name = Column(String(255), nullable=False)
    class_name = Column("class", String(10), nullable=False)  # VII … XII
    dob = Column(Date, nullable=False)
    email = Column(String(255), nullable=True)
    mobile_number = Column(String(20), nullable=False)         # format "+91 XXXXXXXXXX"
    alt_mobile_number = Column(String(20), nullable=True)
    id_card_url = Column(String(500), nullable=True)           # null pour l'inscription centrale
    is_attended = Column(Boolean, nullable=False, default=False)
    certificate_issued = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())
