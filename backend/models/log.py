from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from database import Base


class Log(Base):
    """Audit entry: who did what to which resource, and whether it worked.

    Entries outlive their actor; deleting a profile only clears ``user_id``.
    """
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    action = Column(String(50), index=True)      # LOGIN, STOCK_IN, PRODUCT_GROUP_UPDATE, ...
    resource = Column(String(50), index=True)    # auth, stock, products, ...
    status = Column(String(20), index=True)      # SUCCESS / FAIL
    ip = Column(String(64), nullable=True)
    meta = Column(JSON, nullable=True)

    actor = relationship("Profile", lazy="joined", uselist=False)

    @property
    def actor_email(self):
        return self.actor.email if self.actor is not None else None
