from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base

SUPPLIER_BRANCH = "SUPPLIER"


# Branch ("cabang"): destination of outgoing stock and source of incoming
# stock. The row named SUPPLIER stands for external suppliers.
class Branch(Base):
    __tablename__ = "cabang"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
