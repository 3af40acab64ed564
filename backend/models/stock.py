# backend/models/stock.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Stock events are append-only: created once, never edited or deleted.

class StockIn(Base):
    __tablename__ = "stock_in"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True)
    variant = Column(String, nullable=True)
    quantity = Column(Integer, CheckConstraint("quantity > 0"), nullable=False)

    source_id = Column(Integer, ForeignKey("cabang.id"), nullable=True)
    inbound_category_id = Column(Integer, ForeignKey("jenis_stok_masuk.id"), nullable=True)

    # Required or not depending on the inbound category
    plate_number = Column(String, nullable=True)
    driver = Column(String, nullable=True)
    delivery_note = Column(String, nullable=True)
    return_branch_id = Column(Integer, ForeignKey("cabang.id"), nullable=True)

    owner_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    date = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    product = relationship("Product")
    source = relationship("Branch", foreign_keys=[source_id])
    return_branch = relationship("Branch", foreign_keys=[return_branch_id])
    category = relationship("InboundCategory")


class StockOut(Base):
    __tablename__ = "stock_out"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True)
    variant = Column(String, nullable=True)
    quantity = Column(Integer, CheckConstraint("quantity > 0"), nullable=False)

    destination_id = Column(Integer, ForeignKey("cabang.id"), nullable=True)
    outbound_category_id = Column(Integer, ForeignKey("jenis_stok_keluar.id"), nullable=True)

    owner_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    date = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    product = relationship("Product")
    destination = relationship("Branch")
    category = relationship("OutboundCategory")
