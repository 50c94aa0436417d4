from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from models.base import Base


class Contrato(Base):
    """
    A contract whose pendencies are tracked.

    Identified by the external contract number. Upserted on every sync and
    never deleted; only its registros are replaced.
    """
    __tablename__ = "contratos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    numero = Column(String(50), unique=True, nullable=False, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    registros = relationship(
        "Registro",
        back_populates="contrato",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
