import logging

from bson import ObjectId

from conftest import post_doc, project_doc
from portfolio.config import settings
from portfolio.main import warn_on_open_endpoints

PROJECT_PAYLOAD = {
    "title": "API Project",
    "slug": "api-project",
    "description": "Created through the admin API.",
    "excerpt": "Admin API teaser.",
    "category": "Web",
    "status": "in-progress",
    "technologies": ["FastAPI"],
    "featuredImage": "https://img.example.com/api.png",
    "githubUrl": "",
    "published": True,
}

POST_PAYLOAD = {
    "title": "API Post",
    "slug": "api-post",
    "excerpt": "Written through the admin API.",
    "content": "This body is long enough to pass the content length validation rule.",
    "tags": ["api"],
}


async def test_root_and_security_headers(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert resp.headers["x-frame-options"] == "DENY"
    assert resp.headers["x-content-type-options"] == "nosniff"


async def test_public_project_routes(client, db):
    await db["projects"].insert_many(
        [
            project_doc("shown", 1, featured=True, technologies=["Python"]),
            project_doc("sibling", 2, technologies=["Python"]),
            project_doc("hidden", 3, published=False),
        ]
    )
    resp = await client.get("/projects")
    assert resp.status_code == 200
    assert [p["slug"] for p in resp.json()] == ["sibling", "shown"]
    assert resp.headers["cache-control"] == "public, max-age=60"

    assert [p["slug"] for p in (await client.get("/projects/featured")).json()] == ["shown"]
    assert sorted((await client.get("/projects/slugs")).json()) == ["shown", "sibling"]

    detail = await client.get("/projects/shown")
    assert detail.status_code == 200
    assert detail.json()["createdAt"].endswith("Z")

    related = await client.get("/projects/shown/related")
    assert [p["slug"] for p in related.json()] == ["sibling"]

    assert (await client.get("/projects/hidden")).status_code == 404


async def test_blog_detail_counts_views(client, db):
    await db["blog"].insert_one(post_doc("read-me", 1, views=4))
    resp = await client.get("/blog/read-me")
    assert resp.status_code == 200
    doc = await db["blog"].find_one({"slug": "read-me"})
    assert doc["views"] == 5

    assert (await client.get("/blog/nope")).status_code == 404


async def test_blog_like(client, db):
    result = await db["blog"].insert_one(post_doc("likeable", 1))
    post_id = str(result.inserted_id)
    resp = await client.post(f"/blog/{post_id}/like")
    assert resp.json()["success"] is True
    assert (await db["blog"].find_one({"_id": result.inserted_id}))["likes"] == 1


async def test_blog_search_is_not_cached(client, db):
    await db["blog"].insert_one(post_doc("redis-tips", 1, title="Redis tips"))
    resp = await client.get("/blog", params={"q": "redis"})
    assert [p["slug"] for p in resp.json()] == ["redis-tips"]
    assert resp.headers["cache-control"] == "no-store"


async def test_admin_requires_token(client):
    resp = await client.get("/admin/projects")
    assert resp.status_code == 401


async def test_admin_project_lifecycle(admin_client):
    resp = await admin_client.post("/admin/projects", json=PROJECT_PAYLOAD)
    assert resp.status_code == 201
    project_id = resp.json()["id"]
    assert resp.headers["cache-control"] == "no-store, max-age=0"

    assert (await admin_client.get("/projects/api-project")).status_code == 200

    resp = await admin_client.put(f"/admin/projects/{project_id}", json={"title": "Renamed Project"})
    assert resp.json() == {"success": True, "message": "Project updated successfully!", "id": project_id}
    assert (await admin_client.get("/projects/api-project")).json()["title"] == "Renamed Project"

    resp = await admin_client.post(f"/admin/projects/{project_id}/toggle-published")
    assert resp.json()["message"] == "Project unpublished successfully!"
    assert (await admin_client.get("/projects/api-project")).status_code == 404
    assert (await admin_client.get(f"/admin/projects/{project_id}")).json()["published"] is False

    resp = await admin_client.delete(f"/admin/projects/{project_id}")
    assert resp.json()["success"] is True
    assert (await admin_client.get(f"/admin/projects/{project_id}")).status_code == 404


async def test_admin_missing_project_returns_failed_result(admin_client):
    resp = await admin_client.delete(f"/admin/projects/{ObjectId()}")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Project not found"}


async def test_admin_validation_errors(admin_client):
    resp = await admin_client.post("/admin/projects", json={**PROJECT_PAYLOAD, "slug": "Bad Slug!", "technologies": []})
    assert resp.status_code == 422
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Please check your form data and try again."
    assert "slug" in body["errors"]
    assert "technologies" in body["errors"]


async def test_admin_blog_publish_and_dashboard(admin_client, db):
    resp = await admin_client.post("/admin/blog", json=POST_PAYLOAD)
    post_id = resp.json()["id"]
    assert (await admin_client.get("/blog/api-post")).status_code == 404

    resp = await admin_client.post(f"/admin/blog/{post_id}/toggle-published")
    assert resp.json()["message"] == "Blog post published successfully!"
    post = (await admin_client.get("/blog/api-post")).json()
    assert post["publishedAt"] is not None
    assert post["readTime"] == 1

    await db["projects"].insert_one(project_doc("draft-project", 1, published=False))
    dashboard = (await admin_client.get("/admin/dashboard")).json()
    assert dashboard["projects"] == {"total": 1, "published": 0, "drafts": 1, "featured": 0}
    assert dashboard["blog"]["published"] == 1
    assert dashboard["blog"]["totalViews"] == 1
    assert [p["slug"] for p in dashboard["recentProjects"]] == ["draft-project"]


async def test_health_reports_both_backends(client):
    resp = await client.get("/health")
    assert resp.json() == {"status": "ok", "database": "connected", "cache": "connected"}


async def test_admin_update_rejects_null_for_required_fields(admin_client, db):
    project_id = (await admin_client.post("/admin/projects", json=PROJECT_PAYLOAD)).json()["id"]

    resp = await admin_client.put(
        f"/admin/projects/{project_id}",
        json={"title": None, "technologies": None, "status": None},
    )
    assert resp.status_code == 422
    assert {"title", "technologies", "status"} <= set(resp.json()["errors"])

    doc = await db["projects"].find_one({"_id": ObjectId(project_id)})
    assert doc["title"] == "API Project"
    assert doc["technologies"] == ["FastAPI"]
    assert doc["status"] == "in-progress"


async def test_admin_update_can_clear_optional_links(admin_client, db):
    payload = {**PROJECT_PAYLOAD, "githubUrl": "https://github.com/example/api"}
    project_id = (await admin_client.post("/admin/projects", json=payload)).json()["id"]

    resp = await admin_client.put(f"/admin/projects/{project_id}", json={"githubUrl": ""})
    assert resp.status_code == 200
    doc = await db["projects"].find_one({"_id": ObjectId(project_id)})
    assert doc["githubUrl"] is None


async def test_admin_blog_update_rejects_null_tags(admin_client):
    post_id = (await admin_client.post("/admin/blog", json=POST_PAYLOAD)).json()["id"]
    resp = await admin_client.put(f"/admin/blog/{post_id}", json={"tags": None, "content": None})
    assert resp.status_code == 422
    assert {"tags", "content"} <= set(resp.json()["errors"])


def test_missing_revalidation_secret_is_logged(monkeypatch, caplog):
    monkeypatch.setattr(settings, "REVALIDATION_SECRET", None)
    with caplog.at_level(logging.WARNING, logger="portfolio.main"):
        warn_on_open_endpoints()
    assert "REVALIDATION_SECRET not configured" in caplog.text

    caplog.clear()
    monkeypatch.setattr(settings, "REVALIDATION_SECRET", "s3cret")
    warn_on_open_endpoints()
    assert caplog.text == ""
