from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, validator


class PaymentCreate(BaseModel):
    """Схема для создания платежа"""
    payment_amount: float = Field(..., description="Сумма платежа")
    payment_date: Optional[datetime] = Field(None, description="Дата платежа (по умолчанию сейчас)")
    notes: Optional[str] = Field(None, description="Комментарий")

    @validator('payment_amount')
    def amount_must_be_positive(cls, v):
        if v <= 0:
            raise ValueError('Amount must be positive')
        return v

    @validator('notes')
    def notes_must_be_less_than_500_characters(cls, v):
        if v is not None and len(v) > 500:
            raise ValueError('Notes must be less than 500 characters')
        return v


class PaymentResponse(BaseModel):
    """Схема ответа с информацией о платеже"""
    id: int
    player_id: int
    payment_amount: float
    payment_date: datetime
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PaymentInfoUpdate(BaseModel):
    """Стоимость обучения и первый взнос"""
    total_training_fee: Optional[float] = Field(None, description="Полная стоимость обучения")
    downpayment: Optional[float] = Field(None, description="Первый взнос")

    @validator('total_training_fee', 'downpayment')
    def money_not_negative(cls, v):
        if v is not None and v < 0:
            raise ValueError('Amount must not be negative')
        return v


class BalanceResponse(BaseModel):
    """Схема ответа с остатком к оплате"""
    player_id: int
    total_training_fee: float
    downpayment: float
    total_paid: float
    remaining_balance: float
