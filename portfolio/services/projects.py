"""
Project content: cached public accessors, uncached admin reads, and the admin
write path.

The public queries rely on the compound indexes in ``db.INDEXES``:
published + createdAt, published + featured + createdAt,
published + category + createdAt.
"""

import logging
from typing import Optional

from ..cache import (
    DETAIL_TTL,
    FEATURED_PROJECTS_TAG,
    LIST_TTL,
    PROJECTS_TAG,
    cached,
)
from ..db import PROJECTS
from ..models.project import Project, project_from_document
from ..schemas import ProjectForm, ProjectUpdate
from .relevance import rank_related
from .repository import NEWEST_FIRST, ContentRepository

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"


class ProjectRepository(ContentRepository):
    collection_name = PROJECTS
    tag = PROJECTS_TAG
    label = "project"
    from_document = staticmethod(project_from_document)

    # ---------- public, cached ----------

    @cached("all-projects", tags=[PROJECTS_TAG], ttl=LIST_TTL, model=list[Project], fallback=list)
    async def get_all_projects(self) -> list[Project]:
        return await self._find({"published": True}, sort=NEWEST_FIRST)

    @cached(
        "featured-projects",
        tags=[PROJECTS_TAG, FEATURED_PROJECTS_TAG],
        ttl=LIST_TTL,
        model=list[Project],
        fallback=list,
    )
    async def get_featured_projects(self, limit: int = 4) -> list[Project]:
        return await self._find({"published": True, "featured": True}, sort=NEWEST_FIRST, limit=limit)

    @cached(
        "project-by-slug",
        tags=[PROJECTS_TAG],
        ttl=DETAIL_TTL,
        model=Optional[Project],
        fallback=lambda: None,
    )
    async def get_project_by_slug(self, slug: str) -> Optional[Project]:
        # Duplicate published slugs resolve to the store's first match.
        return await self._find_one({"slug": slug, "published": True})

    @cached("projects-by-category", tags=[PROJECTS_TAG], ttl=LIST_TTL, model=list[Project], fallback=list)
    async def get_projects_by_category(self, category: str) -> list[Project]:
        query = {"published": True}
        if category != ALL_CATEGORIES:
            query["category"] = category
        return await self._find(query, sort=NEWEST_FIRST)

    @cached("related-projects", tags=[PROJECTS_TAG], ttl=DETAIL_TTL, model=list[Project], fallback=list)
    async def get_related_projects(
        self,
        current_project_id: str,
        technologies: list[str],
        category: str,
        limit: int = 3,
    ) -> list[Project]:
        """Same-category projects ranked by shared technologies.

        Projects with no shared technology still fill the list, newest first.
        """
        pool = await self._find({"published": True, "category": category}, sort=NEWEST_FIRST)
        candidates = [p for p in pool if p.id != current_project_id]
        return rank_related(candidates, technologies, lambda p: p.technologies, limit, keep_zero=True)

    @cached("project-slugs", tags=[PROJECTS_TAG], ttl=DETAIL_TTL, model=list[str], fallback=list)
    async def get_all_project_slugs(self) -> list[str]:
        return await self._slugs()

    # ---------- admin, uncached ----------

    async def get_all_projects_admin(self) -> list[Project]:
        """Every project, drafts included, most recently updated first."""
        return await self._list_admin()

    async def get_project_by_id_admin(self, project_id: str) -> Optional[Project]:
        return await self._get_admin(project_id)

    # ---------- mutations ----------

    async def create_project(self, form: ProjectForm) -> str:
        project_id = await self._insert(form.model_dump(mode="json"))
        await self.invalidate()
        return project_id

    async def update_project(self, project_id: str, fields: ProjectUpdate) -> None:
        await self._update(project_id, fields.model_dump(mode="json", exclude_unset=True))
        await self.invalidate()

    async def delete_project(self, project_id: str) -> None:
        await self._delete(project_id)
        await self.invalidate()

    async def toggle_project_published(self, project_id: str) -> bool:
        published = await self._toggle(project_id, "published")
        await self.invalidate()
        return published

    async def toggle_project_featured(self, project_id: str) -> bool:
        featured = await self._toggle(project_id, "featured")
        await self.invalidate()
        return featured
