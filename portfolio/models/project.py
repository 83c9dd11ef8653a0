from typing import Any, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from ..errors import DocumentError
from .documents import document_id, iso_timestamp

ProjectStatus = Literal["completed", "in-progress", "planning"]


class Metric(BaseModel):
    # older seed data used "label" for the metric name
    title: str = Field(validation_alias=AliasChoices("title", "label"))
    value: str
    description: Optional[str] = None


class Project(BaseModel):
    id: str
    title: str = ""
    description: str = ""
    longDescription: Optional[str] = None
    excerpt: str = ""
    featuredImage: str = ""
    images: List[str] = []
    technologies: List[str] = []
    category: str = ""
    githubUrl: Optional[str] = None
    liveUrl: Optional[str] = None
    demoUrl: Optional[str] = None
    featured: bool = False
    published: bool = False
    createdAt: str
    updatedAt: str
    slug: str = ""
    status: ProjectStatus = "planning"
    metaTitle: Optional[str] = None
    metaDescription: Optional[str] = None
    challenges: Optional[str] = None
    solutions: Optional[str] = None
    learnings: Optional[str] = None
    metrics: List[Metric] = []


def project_from_document(doc: dict[str, Any]) -> Project:
    """Turn a raw ``projects`` document into a :class:`Project`.

    Missing fields take the model defaults; a field that is present with the
    wrong shape raises :class:`DocumentError` instead of being papered over.
    """
    data = {k: v for k, v in doc.items() if k != "_id" and v is not None}
    data["id"] = document_id(doc)
    data["createdAt"] = iso_timestamp(doc.get("createdAt"), "createdAt")
    data["updatedAt"] = iso_timestamp(doc.get("updatedAt"), "updatedAt")
    try:
        return Project.model_validate(data)
    except ValidationError as exc:
        raise DocumentError(f"Malformed project {data['id']}: {exc}") from exc
