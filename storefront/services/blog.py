"""
Blog authors, posts and comments.
"""
import logging
import math
from typing import Any, Dict, List

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..db.lookups import lookup_one
from ..models.blog import AuthorDocument, CommentDocument, PostDocument
from ..schemas.blog import CreateAuthorRequest, CreateCommentRequest, CreatePostRequest, UpdatePostRequest
from ..utils.dependencies import get_document_or_404, validate_object_id, validate_pagination_params
from ..utils.serializers import serialize_doc
from ..utils.text import slugify, utcnow

logger = logging.getLogger(__name__)

AUTHOR_SUMMARY = {"name": 1, "avatar": 1}

# Taken by the /posts/search and /posts/popular routes
RESERVED_SLUGS = frozenset({"search", "popular"})


# Authors

async def create_author(db: AsyncIOMotorDatabase, request: CreateAuthorRequest) -> Dict[str, Any]:
    if await db.authors.find_one({"email": request.email}, {"_id": 1}):
        raise HTTPException(status_code=409, detail="An author with this email already exists")

    now = utcnow()
    author_doc = AuthorDocument(**request.model_dump(), created_at=now, updated_at=now).model_dump(exclude={"id"})

    try:
        result = await db.authors.insert_one(author_doc)
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="An author with this email already exists")

    created = await db.authors.find_one({"_id": result.inserted_id})
    logger.info(f"Author created: {request.name} (ID: {result.inserted_id})")
    return serialize_doc(created)


async def get_author(db: AsyncIOMotorDatabase, author_id: str) -> Dict[str, Any]:
    return serialize_doc(await get_document_or_404(db, "authors", author_id, "author"))


# Posts

def build_posts_pipeline(
    match: Dict[str, Any], sort: Dict[str, int], skip: int, limit: int
) -> List[Dict[str, Any]]:
    """Filter, order and page posts, then join the author's name and avatar."""
    return [
        {"$match": match},
        {"$sort": sort},
        {"$skip": skip},
        {"$limit": limit},
        *lookup_one("authors", "author_id", "author", AUTHOR_SUMMARY),
    ]


async def _run_posts_pipeline(db: AsyncIOMotorDatabase, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    cursor = db.posts.aggregate(pipeline)
    posts = await cursor.to_list(length=None)
    return [serialize_doc(p) for p in posts]


async def _with_author(db: AsyncIOMotorDatabase, post: Dict[str, Any]) -> Dict[str, Any]:
    data = serialize_doc(post)
    author = await db.authors.find_one({"_id": validate_object_id(post["author_id"], "author")}, AUTHOR_SUMMARY)
    data["author"] = serialize_doc(author)
    return data


async def _ensure_slug_free(db: AsyncIOMotorDatabase, slug: str, exclude_id=None) -> None:
    if slug in RESERVED_SLUGS:
        raise HTTPException(status_code=409, detail=f"The slug '{slug}' is reserved, choose another title")
    query: Dict[str, Any] = {"slug": slug}
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}
    if await db.posts.find_one(query, {"_id": 1}):
        raise HTTPException(status_code=409, detail=f"A post with slug '{slug}' already exists")


async def create_post(db: AsyncIOMotorDatabase, request: CreatePostRequest) -> Dict[str, Any]:
    await get_document_or_404(db, "authors", request.author_id, "author", projection={"_id": 1})

    slug = slugify(request.title)
    await _ensure_slug_free(db, slug)

    now = utcnow()
    post_doc = PostDocument(
        title=request.title,
        slug=slug,
        content=request.content,
        author_id=request.author_id,
        tags=request.tags,
        published=request.published,
        created_at=now,
        updated_at=now,
    ).model_dump(exclude={"id"})

    try:
        result = await db.posts.insert_one(post_doc)
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail=f"A post with slug '{slug}' already exists")

    created = await db.posts.find_one({"_id": result.inserted_id})
    logger.info(f"Post created: {slug} (ID: {result.inserted_id})")
    return await _with_author(db, created)


async def update_post(db: AsyncIOMotorDatabase, post_id: str, request: UpdatePostRequest) -> Dict[str, Any]:
    """Partial update. A new title also regenerates the slug."""
    object_id = validate_object_id(post_id, "post")

    update_doc = request.model_dump(exclude_none=True)
    if "title" in update_doc:
        update_doc["slug"] = slugify(update_doc["title"])
        await _ensure_slug_free(db, update_doc["slug"], exclude_id=object_id)
    update_doc["updated_at"] = utcnow()

    post = await db.posts.find_one_and_update(
        {"_id": object_id},
        {"$set": update_doc},
        return_document=ReturnDocument.AFTER,
    )
    if not post:
        raise HTTPException(status_code=404, detail=f"Post {post_id} not found")
    return await _with_author(db, post)


async def publish_post(db: AsyncIOMotorDatabase, post_id: str) -> Dict[str, Any]:
    return await update_post(db, post_id, UpdatePostRequest(published=True))


async def list_published_posts(db: AsyncIOMotorDatabase, page: int = 1, limit: int = 10) -> Dict[str, Any]:
    if page < 1:
        raise HTTPException(status_code=400, detail="Page must be 1 or greater")
    limit, offset = validate_pagination_params(limit, (page - 1) * limit)

    match = {"published": True}
    total = await db.posts.count_documents(match)
    posts = await _run_posts_pipeline(
        db, build_posts_pipeline(match, {"created_at": DESCENDING}, offset, limit)
    )

    return {
        "posts": posts,
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": math.ceil(total / limit) if total else 0,
    }


async def list_author_posts(db: AsyncIOMotorDatabase, author_id: str, limit: int = 50) -> List[Dict[str, Any]]:
    await get_document_or_404(db, "authors", author_id, "author", projection={"_id": 1})
    return await _run_posts_pipeline(
        db, build_posts_pipeline({"author_id": author_id}, {"created_at": DESCENDING}, 0, limit)
    )


async def popular_posts(db: AsyncIOMotorDatabase, limit: int = 5) -> List[Dict[str, Any]]:
    return await _run_posts_pipeline(
        db, build_posts_pipeline({"published": True}, {"views": DESCENDING}, 0, limit)
    )


async def search_posts(db: AsyncIOMotorDatabase, query: str, limit: int = 20) -> List[Dict[str, Any]]:
    cursor = db.posts.find(
        {"$text": {"$search": query}, "published": True},
        {"title": 1, "slug": 1, "created_at": 1},
    ).limit(limit)
    hits = await cursor.to_list(length=limit)
    return [serialize_doc(hit) for hit in hits]


async def read_post(db: AsyncIOMotorDatabase, slug: str) -> Dict[str, Any]:
    """Fetch a post by slug, counting the view."""
    post = await db.posts.find_one_and_update(
        {"slug": slug},
        {"$inc": {"views": 1}},
        return_document=ReturnDocument.AFTER,
    )
    if not post:
        raise HTTPException(status_code=404, detail=f"Post '{slug}' not found")
    return await _with_author(db, post)


async def add_comment(db: AsyncIOMotorDatabase, post_id: str, request: CreateCommentRequest) -> Dict[str, Any]:
    object_id = validate_object_id(post_id, "post")

    comment = CommentDocument(user=request.user, text=request.text, created_at=utcnow()).model_dump()
    post = await db.posts.find_one_and_update(
        {"_id": object_id},
        {"$push": {"comments": comment}},
        return_document=ReturnDocument.AFTER,
    )
    if not post:
        raise HTTPException(status_code=404, detail=f"Post {post_id} not found")
    return await _with_author(db, post)
