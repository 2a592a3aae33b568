import logging
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException

from folio import dependencies as deps
from folio.schemas.blog import PostDetail, PostSummary, TagCount
from folio.schemas.post import ParseError
from folio.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts", response_model=List[PostSummary])
def list_posts(
    include_drafts: bool = False,
    order: Literal["desc", "asc"] = "desc",
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get all posts metadata, newest first by default."""
    try:
        return service.list_posts(include_drafts=include_drafts, order=order)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/posts/{slug}", response_model=PostDetail)
def get_post(
    slug: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get a single post by slug."""
    try:
        post = service.get_post(slug)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return post
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")


@router.get("/tags", response_model=List[TagCount])
def list_tags(service: PostsService = Depends(deps.get_posts_service)):
    try:
        return service.list_tags()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing tags: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve tags")


@router.get("/tags/{tag}", response_model=List[PostSummary])
def posts_for_tag(
    tag: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    try:
        posts = service.posts_for_tag(tag)
        if posts is None:
            raise HTTPException(status_code=404, detail="Tag not found")
        return posts
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts for tag {tag}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/errors", response_model=List[ParseError])
def list_errors(service: PostsService = Depends(deps.get_posts_service)):
    """Files and units that could not be parsed on the last load."""
    try:
        return service.list_errors()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing parse errors: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve errors")
