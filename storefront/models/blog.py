"""
Blog data models for database documents.
Posts reference their author by id and embed their comments.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthorDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    name: str
    email: str
    bio: Optional[str] = None
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CommentDocument(BaseModel):
    user: str
    text: str
    created_at: datetime


class PostDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, alias="_id")
    title: str
    slug: str
    content: Optional[str] = None
    author_id: str
    tags: List[str] = Field(default_factory=list)
    published: bool = False
    views: int = 0
    comments: List[CommentDocument] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
