from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from hoops_admin.database import Base


class PlayerPayment(Base):
    """Платеж игрока (только добавление и удаление, без изменения на месте)"""
    __tablename__ = "player_payments"

    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True)
    payment_amount = Column(Float, nullable=False)
    payment_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    player = relationship("Player", back_populates="payments")

    def __repr__(self):
        return f"<PlayerPayment(id={self.id}, player_id={self.player_id}, amount={self.payment_amount})>"
