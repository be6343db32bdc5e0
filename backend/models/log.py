from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from database import Base

# One row per cart or checkout action, written by utils.audit.write_log
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Who did what to which cart or order
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    action = Column(String(50), index=True) # CART_ADD, CHECKOUT_CREATE, ...
    resource = Column(String(50), index=True) # "cart" or "orders"
    resource_id = Column(Integer, nullable=True, index=True)
    status = Column(String(20), index=True) # SUCCESS / FAIL
    ip = Column(String(64), nullable=True)

    # Quantities, totals and status changes for the action
    meta = Column(JSON, nullable=True)
