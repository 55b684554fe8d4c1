import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config.database import get_database
from ..config.settings import get_settings
from ..schemas.blog import (
    AuthorResponse,
    CreateAuthorRequest,
    CreateCommentRequest,
    CreatePostRequest,
    PostResponse,
    PostSearchHit,
    PostsListResponse,
    UpdatePostRequest,
)
from ..services import blog

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Blog"])


@router.post("/authors", status_code=201, response_model=AuthorResponse)
async def create_author(request: CreateAuthorRequest, db=Depends(get_database)):
    try:
        return await blog.create_author(db, request)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create author: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to create author: {str(e)}")


@router.get("/authors/{author_id}", response_model=AuthorResponse)
async def get_author(author_id: str, db=Depends(get_database)):
    try:
        return await blog.get_author(db, author_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch author {author_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch author: {str(e)}")


@router.get("/authors/{author_id}/posts", response_model=List[PostResponse])
async def list_author_posts(author_id: str, limit: int = Query(50, ge=1, le=100), db=Depends(get_database)):
    try:
        return await blog.list_author_posts(db, author_id, limit)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch posts of author {author_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch posts: {str(e)}")


@router.post("/posts", status_code=201, response_model=PostResponse)
async def create_post(request: CreatePostRequest, db=Depends(get_database)):
    try:
        return await blog.create_post(db, request)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create post: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to create post: {str(e)}")


@router.get("/posts", response_model=PostsListResponse)
async def list_published_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db=Depends(get_database),
):
    """Published posts, newest first"""
    try:
        return await blog.list_published_posts(db, page, limit)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch posts: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch posts: {str(e)}")


@router.get("/posts/search", response_model=List[PostSearchHit])
async def search_posts(q: str = Query(..., min_length=1), limit: int = Query(20, ge=1, le=100), db=Depends(get_database)):
    try:
        return await blog.search_posts(db, q, limit)
    except Exception as e:
        logger.error(f"Post search failed for {q!r}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to search posts: {str(e)}")


@router.get("/posts/popular", response_model=List[PostResponse])
async def popular_posts(limit: Optional[int] = Query(None, ge=1, le=50), db=Depends(get_database)):
    """Most viewed published posts"""
    try:
        return await blog.popular_posts(db, limit or get_settings().popular_posts_limit)
    except Exception as e:
        logger.error(f"Failed to fetch popular posts: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch popular posts: {str(e)}")


@router.get("/posts/{slug}", response_model=PostResponse)
async def read_post(slug: str, db=Depends(get_database)):
    """Read a post by slug. Each read counts as a view."""
    try:
        return await blog.read_post(db, slug)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch post {slug}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch post: {str(e)}")


@router.patch("/posts/{post_id}", response_model=PostResponse)
async def update_post(post_id: str, request: UpdatePostRequest, db=Depends(get_database)):
    try:
        return await blog.update_post(db, post_id, request)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update post {post_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to update post: {str(e)}")


@router.post("/posts/{post_id}/publish", response_model=PostResponse)
async def publish_post(post_id: str, db=Depends(get_database)):
    try:
        return await blog.publish_post(db, post_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to publish post {post_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to publish post: {str(e)}")


@router.post("/posts/{post_id}/comments", status_code=201, response_model=PostResponse)
async def add_comment(post_id: str, request: CreateCommentRequest, db=Depends(get_database)):
    try:
        return await blog.add_comment(db, post_id, request)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to comment on post {post_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to add comment: {str(e)}")
