from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=256)

class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=256)
    slug: Optional[str] = Field(None, min_length=1, max_length=256, pattern=r'^[a-z0-9]+(?:-[a-z0-9]+)*$')

class CategoryGet(BaseModel):
    id: int
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)
