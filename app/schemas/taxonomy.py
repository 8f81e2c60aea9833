from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TagCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    slug: Optional[str] = None


class CategoryCreate(TagCreate):
    description: Optional[str] = None


class TagOut(BaseModel):
    id: str
    name: str
    slug: str
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class CategoryOut(TagOut):
    description: Optional[str] = None
