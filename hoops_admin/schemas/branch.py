from datetime import datetime
from typing import Optional

from pydantic import BaseModel, validator


class BranchBase(BaseModel):
    name: str
    address: str
    city: str
    contact_info: Optional[str] = None


class BranchCreate(BranchBase):
    @validator('name', 'address', 'city')
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Field must not be empty")
        return v.strip()


class BranchUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    contact_info: Optional[str] = None


class BranchResponse(BranchBase):
    id: int
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
