from fastapi import Depends

from folio.repos.posts_repo import FilesystemPostsRepo
from folio.services.content_parser import ContentParser
from folio.services.posts_service import PostsService
from folio.settings import settings


def get_posts_repo():
    return FilesystemPostsRepo(settings.CONTENT_DIR)


def get_content_parser():
    return ContentParser(settings.DOCUMENT_SEPARATOR_PATTERN)


def get_posts_service(
    repo=Depends(get_posts_repo),
    parser=Depends(get_content_parser),
):
    return PostsService(repo=repo, parser=parser, workers=settings.LOAD_WORKERS)
