from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from models.base import Base


class Registro(Base):
    """
    One pendency row as delivered by the scraping API.

    All text columns hold raw upstream text. Structured views (author info,
    pending actions, type label) are derived on read and never stored.
    Ids are not stable across syncs: a sync deletes and re-inserts every
    registro of a contract.
    """
    __tablename__ = "registros"

    id = Column(Integer, primary_key=True, autoincrement=True)
    contrato_id = Column(
        Integer,
        ForeignKey("contratos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    autor = Column(Text, nullable=False)
    data = Column(Text, nullable=False)
    extra_info = Column(Text, nullable=False, default="")
    numero = Column(String(255), nullable=True)
    prazo = Column(String(255), nullable=False, default="")
    status = Column(String(255), nullable=False, default="", index=True)
    tipo = Column(String(255), nullable=False, default="", index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    contrato = relationship("Contrato", back_populates="registros")

    __table_args__ = (
        Index("idx_registro_contrato_status", "contrato_id", "status"),
    )
