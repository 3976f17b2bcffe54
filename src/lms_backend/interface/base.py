from typing import Optional
from pydantic import BaseModel, Field

class ListQuery(BaseModel):
    skip: Optional[int] = Field(0, ge=0)
    limit: Optional[int] = Field(100, ge=1, le=1000)
