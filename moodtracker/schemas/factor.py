from typing import Optional

from pydantic import BaseModel


class FactorOut(BaseModel):
    factor_id: int
    name: str
    category: str
    icon: Optional[str] = None

    class Config:
        from_attributes = True


class FactorPatch(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    icon: Optional[str] = None
