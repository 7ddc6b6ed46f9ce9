"""Knowledge-base article pydantic models."""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from ..data.models import KnowledgeCategory

class KnowledgeCreate(BaseModel):
    category: KnowledgeCategory
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    keywords: List[str] = Field(default_factory=list)
    priority: int = Field(default=1, ge=1, le=10)

    @field_validator("keywords")
    @classmethod
    def _lower(cls, v: List[str]) -> List[str]:
        return [k.lower() for k in v]

class KnowledgeUpdate(BaseModel):
    category: Optional[KnowledgeCategory] = None
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    keywords: Optional[List[str]] = None
    priority: Optional[int] = Field(default=None, ge=1, le=10)

class KnowledgeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category: KnowledgeCategory
    title: str
    content: str
    keywords: List[str]
    priority: int
    views: int
    helpful_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
