"""
Blog API schemas.
"""
from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class CreateAuthorRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    bio: Optional[str] = Field(None, max_length=1000)
    avatar: Optional[str] = None

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower()


class AuthorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    email: str
    bio: Optional[str] = None
    avatar: Optional[str] = None
    created_at: datetime


class AuthorSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    avatar: Optional[str] = None


class CreatePostRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    content: Optional[str] = None
    author_id: str
    tags: List[str] = Field(default_factory=list)
    published: bool = False

    @field_validator("author_id")
    @classmethod
    def validate_author_id(cls, v):
        if not ObjectId.is_valid(v):
            raise ValueError("Invalid author ID format")
        return str(ObjectId(v))


class UpdatePostRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    published: Optional[bool] = None


class CreateCommentRequest(BaseModel):
    user: str = Field(..., min_length=1, max_length=100)
    text: str = Field(..., min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    user: str
    text: str
    created_at: datetime


class PostResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    title: str
    slug: str
    content: Optional[str] = None
    author_id: str
    author: Optional[AuthorSummary] = None
    tags: List[str] = Field(default_factory=list)
    published: bool
    views: int = 0
    comments: List[CommentResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None


class PostsListResponse(BaseModel):
    posts: List[PostResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class PostSearchHit(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    title: str
    slug: str
    created_at: datetime
