from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base


# Outbound movement classification ("jenis stok keluar")
class OutboundCategory(Base):
    __tablename__ = "jenis_stok_keluar"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


# Inbound movement classification ("jenis stok masuk").
# `code` is stable and drives the required-field rules, `name` is display only.
class InboundCategory(Base):
    __tablename__ = "jenis_stok_masuk"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
