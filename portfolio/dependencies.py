from fastapi import Depends, Request

from .cache import ContentCache
from .db import get_db
from .services.blog import BlogRepository
from .services.contact import ContactService
from .services.projects import ProjectRepository


def get_cache(request: Request) -> ContentCache:
    return request.app.state.cache


def get_project_repository(db=Depends(get_db), cache: ContentCache = Depends(get_cache)) -> ProjectRepository:
    return ProjectRepository(db, cache)


def get_blog_repository(db=Depends(get_db), cache: ContentCache = Depends(get_cache)) -> BlogRepository:
    return BlogRepository(db, cache)


def get_contact_service(db=Depends(get_db)) -> ContactService:
    return ContactService(db)
