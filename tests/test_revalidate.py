import pytest

from conftest import post_doc, project_doc
from portfolio.config import settings
from portfolio.routers.cache import tags_for_path


@pytest.mark.parametrize(
    "path, tags",
    [
        ("/", ["projects", "featured-projects", "blog", "featured-blog"]),
        ("/projects", ["projects"]),
        ("/projects/some-slug", ["projects"]),
        ("/blog/", ["blog"]),
        ("/blog/a-post", ["blog"]),
        ("/about", []),
        ("/projectsx", []),
    ],
)
def test_tags_for_path(path, tags):
    assert tags_for_path(path) == tags


async def test_revalidate_tag_drops_cached_entries(client, db, projects):
    await db["projects"].insert_one(project_doc("cached", 1))
    assert len(await projects.get_all_projects()) == 1
    await db["projects"].insert_one(project_doc("fresh", 2))
    assert len(await projects.get_all_projects()) == 1

    resp = await client.post("/api/revalidate", json={"tag": "projects"})
    body = resp.json()
    assert resp.status_code == 200
    assert body["revalidated"] is True
    assert body["tags"] == ["projects"]
    assert isinstance(body["now"], int)
    assert len(await projects.get_all_projects()) == 2


async def test_revalidate_path_leaves_other_tags(client, db, projects, blog):
    await db["projects"].insert_one(project_doc("p", 1))
    await db["blog"].insert_one(post_doc("b", 1))
    await projects.get_all_projects()
    await blog.get_all_blog_posts()

    resp = await client.get("/api/revalidate", params={"path": "/blog"})
    assert resp.json()["tags"] == ["blog"]

    await db["projects"].insert_one(project_doc("p2", 2))
    await db["blog"].insert_one(post_doc("b2", 2))
    assert len(await projects.get_all_projects()) == 1
    assert len(await blog.get_all_blog_posts()) == 2


async def test_revalidate_without_target_refreshes_project_pages(client):
    resp = await client.post("/api/revalidate", json={})
    assert resp.json()["tags"] == ["projects", "featured-projects"]


async def test_revalidate_checks_secret(client, monkeypatch):
    monkeypatch.setattr(settings, "REVALIDATION_SECRET", "s3cret")
    assert (await client.post("/api/revalidate", json={"tag": "blog"})).status_code == 401
    assert (await client.get("/api/revalidate", params={"secret": "wrong"})).status_code == 401
    resp = await client.post("/api/revalidate", json={"tag": "blog", "secret": "s3cret"})
    assert resp.status_code == 200


async def test_cache_stats_requires_admin(client):
    assert (await client.get("/api/cache/stats")).status_code == 401


async def test_cache_stats_reports_entries(admin_client, projects):
    await projects.get_all_projects()
    resp = await admin_client.get("/api/cache/stats")
    assert resp.status_code == 200
    assert resp.json()["entries"] == 1
    assert resp.json()["tags"]["projects"] == 1
