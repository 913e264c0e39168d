from typing import Optional, List
from pydantic import BaseModel, ConfigDict


class CompanyCreate(BaseModel):
    name: str
    cnpj: Optional[str] = None
    estado: Optional[str] = None
    contact: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class CompanyRead(CompanyCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str


class CompanyListResponse(BaseModel):
    items: List[CompanyRead]
    total: int
