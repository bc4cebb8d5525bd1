from datetime import datetime

from pydantic import BaseModel, Field


class ClientWrite(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = None
    cin: str | None = Field(default=None, max_length=50)
    ice: str | None = Field(default=None, max_length=50)


class ClientRead(BaseModel):
    id: int
    name: str
    email: str | None
    phone: str | None
    address: str | None
    cin: str | None
    ice: str | None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
