from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ..cache import DETAIL_TTL, LIST_TTL
from ..dependencies import get_project_repository
from ..models.project import Project
from ..services.projects import ProjectRepository

router = APIRouter(prefix="/projects", tags=["projects"])


def _cache_for(response: Response, seconds: int) -> None:
    response.headers["Cache-Control"] = f"public, max-age={seconds}"


@router.get("", response_model=list[Project])
async def list_projects(
    response: Response,
    category: str | None = Query(default=None),
    repo: ProjectRepository = Depends(get_project_repository),
):
    """Published projects, newest first, optionally filtered by category."""
    _cache_for(response, LIST_TTL)
    if category:
        return await repo.get_projects_by_category(category.strip())
    return await repo.get_all_projects()


@router.get("/featured", response_model=list[Project])
async def featured_projects(
    response: Response,
    limit: int = Query(default=4, ge=1, le=20),
    repo: ProjectRepository = Depends(get_project_repository),
):
    _cache_for(response, LIST_TTL)
    return await repo.get_featured_projects(limit)


@router.get("/slugs", response_model=list[str])
async def project_slugs(response: Response, repo: ProjectRepository = Depends(get_project_repository)):
    _cache_for(response, DETAIL_TTL)
    return await repo.get_all_project_slugs()


@router.get("/{slug}", response_model=Project)
async def get_project(
    slug: str,
    response: Response,
    repo: ProjectRepository = Depends(get_project_repository),
):
    project = await repo.get_project_by_slug(slug)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    _cache_for(response, DETAIL_TTL)
    return project


@router.get("/{slug}/related", response_model=list[Project])
async def related_projects(
    slug: str,
    response: Response,
    limit: int = Query(default=3, ge=1, le=12),
    repo: ProjectRepository = Depends(get_project_repository),
):
    project = await repo.get_project_by_slug(slug)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    _cache_for(response, DETAIL_TTL)
    return await repo.get_related_projects(project.id, project.technologies, project.category, limit)
