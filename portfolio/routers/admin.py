"""
Admin content management. Every route requires the admin bearer token.

Results go back as ``ActionResult``; repository errors are turned into a
failed result with the matching status code.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from ..dependencies import get_blog_repository, get_project_repository
from ..errors import ContentError, NotFoundError
from ..models.blog import BlogPost
from ..models.project import Project
from ..schemas import ActionResult, BlogPostForm, BlogPostUpdate, ProjectForm, ProjectUpdate
from ..services.auth_service import get_current_admin
from ..services.blog import BlogRepository
from ..services.projects import ProjectRepository

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(get_current_admin)])


def failure(e: ContentError) -> JSONResponse:
    status_code = 404 if isinstance(e, NotFoundError) else 500
    return JSONResponse(
        status_code=status_code,
        content=ActionResult(success=False, message=e.message).model_dump(exclude_none=True),
    )


# ---------- projects ----------

@router.get("/projects", response_model=list[Project])
async def list_projects(repo: ProjectRepository = Depends(get_project_repository)):
    return await repo.get_all_projects_admin()


@router.get("/projects/{project_id}", response_model=Project)
async def get_project(project_id: str, repo: ProjectRepository = Depends(get_project_repository)):
    project = await repo.get_project_by_id_admin(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("/projects", response_model=ActionResult, response_model_exclude_none=True, status_code=201)
async def create_project(form: ProjectForm, repo: ProjectRepository = Depends(get_project_repository)):
    try:
        project_id = await repo.create_project(form)
    except ContentError as e:
        return failure(e)
    return ActionResult(success=True, message="Project created successfully!", id=project_id)


@router.put("/projects/{project_id}", response_model=ActionResult, response_model_exclude_none=True)
async def update_project(
    project_id: str,
    fields: ProjectUpdate,
    repo: ProjectRepository = Depends(get_project_repository),
):
    try:
        await repo.update_project(project_id, fields)
    except ContentError as e:
        return failure(e)
    return ActionResult(success=True, message="Project updated successfully!", id=project_id)


@router.delete("/projects/{project_id}", response_model=ActionResult, response_model_exclude_none=True)
async def delete_project(project_id: str, repo: ProjectRepository = Depends(get_project_repository)):
    try:
        await repo.delete_project(project_id)
    except ContentError as e:
        return failure(e)
    return ActionResult(success=True, message="Project deleted successfully!")


@router.post("/projects/{project_id}/toggle-published", response_model=ActionResult, response_model_exclude_none=True)
async def toggle_project_published(project_id: str, repo: ProjectRepository = Depends(get_project_repository)):
    try:
        published = await repo.toggle_project_published(project_id)
    except ContentError as e:
        return failure(e)
    return ActionResult(
        success=True,
        message=f"Project {'published' if published else 'unpublished'} successfully!",
        id=project_id,
    )


@router.post("/projects/{project_id}/toggle-featured", response_model=ActionResult, response_model_exclude_none=True)
async def toggle_project_featured(project_id: str, repo: ProjectRepository = Depends(get_project_repository)):
    try:
        featured = await repo.toggle_project_featured(project_id)
    except ContentError as e:
        return failure(e)
    return ActionResult(
        success=True,
        message=f"Project {'featured' if featured else 'unfeatured'} successfully!",
        id=project_id,
    )


# ---------- blog ----------

@router.get("/blog", response_model=list[BlogPost])
async def list_posts(repo: BlogRepository = Depends(get_blog_repository)):
    return await repo.get_all_blog_posts_admin()


@router.get("/blog/{post_id}", response_model=BlogPost)
async def get_post(post_id: str, repo: BlogRepository = Depends(get_blog_repository)):
    post = await repo.get_blog_post_by_id_admin(post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.post("/blog", response_model=ActionResult, response_model_exclude_none=True, status_code=201)
async def create_post(form: BlogPostForm, repo: BlogRepository = Depends(get_blog_repository)):
    try:
        post_id = await repo.create_blog_post(form)
    except ContentError as e:
        return failure(e)
    return ActionResult(success=True, message="Blog post created successfully!", id=post_id)


@router.put("/blog/{post_id}", response_model=ActionResult, response_model_exclude_none=True)
async def update_post(
    post_id: str,
    fields: BlogPostUpdate,
    repo: BlogRepository = Depends(get_blog_repository),
):
    try:
        await repo.update_blog_post(post_id, fields)
    except ContentError as e:
        return failure(e)
    return ActionResult(success=True, message="Blog post updated successfully!", id=post_id)


@router.delete("/blog/{post_id}", response_model=ActionResult, response_model_exclude_none=True)
async def delete_post(post_id: str, repo: BlogRepository = Depends(get_blog_repository)):
    try:
        await repo.delete_blog_post(post_id)
    except ContentError as e:
        return failure(e)
    return ActionResult(success=True, message="Blog post deleted successfully!")


@router.post("/blog/{post_id}/toggle-published", response_model=ActionResult, response_model_exclude_none=True)
async def toggle_post_published(post_id: str, repo: BlogRepository = Depends(get_blog_repository)):
    try:
        published = await repo.toggle_blog_post_published(post_id)
    except ContentError as e:
        return failure(e)
    return ActionResult(
        success=True,
        message=f"Blog post {'published' if published else 'unpublished'} successfully!",
        id=post_id,
    )


@router.post("/blog/{post_id}/toggle-featured", response_model=ActionResult, response_model_exclude_none=True)
async def toggle_post_featured(post_id: str, repo: BlogRepository = Depends(get_blog_repository)):
    try:
        featured = await repo.toggle_blog_post_featured(post_id)
    except ContentError as e:
        return failure(e)
    return ActionResult(
        success=True,
        message=f"Blog post {'featured' if featured else 'unfeatured'} successfully!",
        id=post_id,
    )


# ---------- dashboard ----------

@router.get("/dashboard")
async def dashboard(
    projects: ProjectRepository = Depends(get_project_repository),
    blog: BlogRepository = Depends(get_blog_repository),
):
    """Content counts plus the five most recently edited projects."""
    all_projects = await projects.get_all_projects_admin()
    all_posts = await blog.get_all_blog_posts_admin()

    def counts(items) -> dict:
        published = sum(1 for i in items if i.published)
        return {
            "total": len(items),
            "published": published,
            "drafts": len(items) - published,
            "featured": sum(1 for i in items if i.featured),
        }

    return {
        "projects": counts(all_projects),
        "blog": {**counts(all_posts), "totalViews": sum(p.views for p in all_posts)},
        "recentProjects": [p.model_dump() for p in all_projects[:5]],
    }
