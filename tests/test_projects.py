"""
Project and category management: data layer, dashboard form routes, JSON API
and image uploads.
"""

import io
import secrets

import pytest

from studiofolio.core.drafts import DRAFT_TOO_LARGE_MESSAGE
from studiofolio.core.validation import ValidationError
from studiofolio.modules.projects.database import (
    create_project, fetch_home_projects, fetch_projects, filter_by_category, slugify,
)
from studiofolio.modules.projects.forms import DRAFT_SESSION_KEY


def _image(name="photo.png", content=b"\x89PNG fake"):
    return (io.BytesIO(content), name)


def _draft(client):
    with client.session_transaction() as sess:
        return sess.get(DRAFT_SESSION_KEY)


# ---------------------------------------------------------------------------
# Data layer
# ---------------------------------------------------------------------------

def test_validation_happens_before_any_backend_call(app, backend):
    """A draft without title or category never reaches the backend."""
    with app.app_context():
        with pytest.raises(ValidationError) as excinfo:
            create_project({"title": "  ", "category_id": ""})

    assert excinfo.value.missing == ["title", "category_id"]
    assert backend.calls == []


def test_optional_empty_strings_become_null(app, backend, categories):
    with app.app_context():
        create_project({
            "title": "Landing page",
            "category_id": categories["website-development"]["id"],
            "demo_url": "",
            "youtube_views": 0,
            "category_slug": "website-development",
        })

    stored = backend.tables["projects"][0]
    assert stored["demo_url"] is None
    assert stored["youtube_views"] is None
    assert "category_slug" not in stored


def test_projects_join_category(app, backend, categories):
    """Project rows come back with their category name and slug embedded."""
    backend.seed("projects", title="Reel", category_id=categories["instagram-reels"]["id"])

    with app.app_context():
        projects = fetch_projects()

    assert projects[0]["project_categories"] == {"name": "Instagram Reels", "slug": "instagram-reels"}


def test_home_projects_newest_four(app, backend, categories):
    """Six show_on_home projects: the four newest are returned, newest first."""
    category_id = categories["graphic-design"]["id"]
    for i in range(1, 7):
        backend.seed("projects", title=f"Project {i}", category_id=category_id, show_on_home=True)
    backend.seed("projects", title="Hidden", category_id=category_id, show_on_home=False)

    with app.app_context():
        projects = fetch_home_projects()

    assert [p["title"] for p in projects] == ["Project 6", "Project 5", "Project 4", "Project 3"]


def test_home_limit_zero_returns_no_projects(app, backend, categories):
    backend.seed("projects", title="Flagged", category_id=categories["graphic-design"]["id"], show_on_home=True)
    app.config["HOME_PROJECTS_LIMIT"] = 0

    with app.app_context():
        assert fetch_home_projects() == []


def test_filter_by_category():
    projects = [
        {"title": "a", "project_categories": {"slug": "graphic-design"}},
        {"title": "b", "project_categories": {"slug": "video-editing"}},
        {"title": "c", "project_categories": None},
    ]

    assert [p["title"] for p in filter_by_category(projects, "all")] == ["a", "b", "c"]
    assert [p["title"] for p in filter_by_category(projects, "video-editing")] == ["b"]
    assert filter_by_category(projects, "instagram-reels") == []


def test_slugify():
    assert slugify("Website Development") == "website-development"
    assert slugify("  UI / UX  ") == "ui-ux"


# ---------------------------------------------------------------------------
# Draft form routes
# ---------------------------------------------------------------------------

def test_draft_update_keeps_form_open(admin_client, backend, categories):
    """Submitting without action=save stores the draft and reopens the form."""
    response = admin_client.post("/admin/projects-editor/draft", data={
        "category_id": str(categories["graphic-design"]["id"]),
    })

    assert response.status_code == 302
    assert "add=1" in response.headers["Location"]
    draft = _draft(admin_client)
    assert draft["category_slug"] == "graphic-design"
    assert backend.backend_calls("insert", "projects") == []


def test_create_project_resets_draft_and_refetches(admin_client, backend, categories, flashes):
    category_id = str(categories["graphic-design"]["id"])
    admin_client.post("/admin/projects-editor/draft", data={"category_id": category_id})

    response = admin_client.post("/admin/projects-editor/draft", data={
        "action": "save",
        "category_id": category_id,
        "title": "Brand kit",
        "client_name": "Acme",
        "brand_name": "Acme Co",
        "show_on_home": "1",
    })

    assert response.status_code == 302
    assert "add=1" not in response.headers["Location"]
    assert ("success", "Project added successfully") in flashes()
    assert _draft(admin_client) is None

    stored = backend.tables["projects"][0]
    assert stored["title"] == "Brand kit"
    assert stored["show_on_home"] is True
    assert stored["is_featured"] is False

    page = admin_client.get("/admin/dashboard?tab=projects").get_data(as_text=True)
    assert "Brand kit" in page


def test_create_without_title_flashes_required(admin_client, backend, categories, flashes):
    category_id = str(categories["graphic-design"]["id"])
    admin_client.post("/admin/projects-editor/draft", data={"category_id": category_id})

    response = admin_client.post("/admin/projects-editor/draft", data={
        "action": "save", "category_id": category_id, "title": "",
    })

    assert "add=1" in response.headers["Location"]
    assert ("error", "Please fill in required fields") in flashes()
    assert backend.backend_calls("insert", "projects") == []


def test_create_failure_keeps_draft(admin_client, backend, categories, flashes):
    category_id = str(categories["graphic-design"]["id"])
    admin_client.post("/admin/projects-editor/draft", data={"category_id": category_id})
    backend.fail("insert", "projects")

    response = admin_client.post("/admin/projects-editor/draft", data={
        "action": "save", "category_id": category_id, "title": "Poster",
    })

    assert "add=1" in response.headers["Location"]
    assert ("error", "Failed to add project") in flashes()
    assert _draft(admin_client)["title"] == "Poster"


def test_reset_draft(admin_client, categories):
    admin_client.post("/admin/projects-editor/draft", data={
        "category_id": str(categories["graphic-design"]["id"]),
    })

    admin_client.post("/admin/projects-editor/draft/reset")

    assert _draft(admin_client)["category_id"] == ""


def test_category_lookup_retried_after_failure(admin_client, backend, categories, flashes):
    """Resubmitting the same category retries a lookup that failed earlier."""
    category_id = str(categories["graphic-design"]["id"])
    backend.fail("select", "project_categories")
    admin_client.post("/admin/projects-editor/draft", data={"category_id": category_id})

    assert ("error", "Failed to fetch categories") in flashes()
    assert _draft(admin_client)["category_slug"] == ""

    backend.failures.clear()
    admin_client.post("/admin/projects-editor/draft", data={"category_id": category_id})

    draft = _draft(admin_client)
    assert draft["category_id"] == category_id
    assert draft["category_slug"] == "graphic-design"
    page = admin_client.get("/admin/dashboard?tab=projects&add=1").get_data(as_text=True)
    assert 'name="client_name"' in page


def test_draft_within_cookie_limit_is_kept(admin_client, categories, flashes):
    category_id = str(categories["graphic-design"]["id"])
    admin_client.post("/admin/projects-editor/draft", data={"category_id": category_id})
    description = secrets.token_hex(1000)

    admin_client.post("/admin/projects-editor/draft", data={
        "category_id": category_id, "title": "Poster", "description": description,
    })

    assert _draft(admin_client)["description"] == description
    assert ("error", DRAFT_TOO_LARGE_MESSAGE) not in flashes()


def test_oversized_draft_is_refused(admin_client, categories, flashes):
    """A draft that would overflow the session cookie keeps the previous draft and says so."""
    category_id = str(categories["graphic-design"]["id"])
    admin_client.post("/admin/projects-editor/draft", data={"category_id": category_id})
    admin_client.post("/admin/projects-editor/draft", data={"category_id": category_id, "title": "Poster"})

    response = admin_client.post("/admin/projects-editor/draft", data={
        "category_id": category_id, "title": "Poster", "description": secrets.token_hex(4500),
    })

    for cookie in response.headers.getlist("Set-Cookie"):
        assert len(cookie) <= 4093
    assert ("error", DRAFT_TOO_LARGE_MESSAGE) in flashes()
    draft = _draft(admin_client)
    assert draft["title"] == "Poster"
    assert draft["description"] == ""


def test_oversized_draft_can_still_be_saved(admin_client, backend, categories, flashes):
    category_id = str(categories["graphic-design"]["id"])
    admin_client.post("/admin/projects-editor/draft", data={"category_id": category_id})
    description = secrets.token_hex(4500)

    admin_client.post("/admin/projects-editor/draft", data={
        "action": "save", "category_id": category_id, "title": "Poster", "description": description,
    })

    assert backend.tables["projects"][0]["description"] == description
    assert ("success", "Project added successfully") in flashes()
    assert _draft(admin_client) is None


def test_delete_project(admin_client, backend, categories, flashes):
    project = backend.seed("projects", title="Old", category_id=categories["graphic-design"]["id"])

    admin_client.post(f"/admin/projects-editor/{project['id']}/delete")

    assert backend.tables["projects"] == []
    assert ("success", "Project deleted successfully") in flashes()


def test_delete_failure_leaves_project(admin_client, backend, categories, flashes):
    project = backend.seed("projects", title="Keep", category_id=categories["graphic-design"]["id"])
    backend.fail("delete", "projects")

    admin_client.post(f"/admin/projects-editor/{project['id']}/delete")

    assert len(backend.tables["projects"]) == 1
    assert ("error", "Failed to delete project") in flashes()


def test_edit_project(admin_client, backend, categories):
    project = backend.seed("projects", title="Draft title", category_id=categories["video-editing"]["id"])

    response = admin_client.post(f"/admin/projects-editor/{project['id']}/edit", data={
        "title": "Final title", "duration": "1:30",
    })

    assert "edit=" not in response.headers["Location"]
    stored = backend.tables["projects"][0]
    assert stored["title"] == "Final title"
    assert stored["social_links"] == {"duration": "1:30"}


def test_edit_failure_keeps_edit_open(admin_client, backend, categories):
    project = backend.seed("projects", title="Draft title", category_id=categories["video-editing"]["id"])
    backend.fail("update", "projects")

    response = admin_client.post(f"/admin/projects-editor/{project['id']}/edit", data={"title": "New"})

    assert f"edit={project['id']}" in response.headers["Location"]


def test_toggle_show_on_home(admin_client, backend, categories):
    project = backend.seed("projects", title="P", category_id=categories["graphic-design"]["id"],
                           show_on_home=False)

    admin_client.post(f"/admin/projects-editor/{project['id']}/toggle/show_on_home")

    assert backend.tables["projects"][0]["show_on_home"] is True


def test_add_category_derives_slug(admin_client, backend):
    admin_client.post("/admin/projects-editor/categories", data={"name": "Motion Graphics"})

    assert backend.tables["project_categories"][0]["slug"] == "motion-graphics"


def test_rename_category(admin_client, backend, categories):
    category = categories["video-editing"]

    admin_client.post(f"/admin/projects-editor/categories/{category['id']}/edit", data={
        "name": "Video Production", "slug": "",
    })

    stored = backend.find("project_categories", category["id"])
    assert stored["name"] == "Video Production"
    assert stored["slug"] == "video-production"


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

def test_upload_images_into_draft(admin_client, backend):
    response = admin_client.post("/admin/projects-editor/draft/images", data={
        "images": [_image("a.png"), _image("b.JPG")],
    }, content_type="multipart/form-data")

    assert response.status_code == 302
    images = _draft(admin_client)["images"]
    assert len(images) == 2
    assert images[0].startswith("https://storage.test/project-images/")
    assert images[1].endswith(".jpg")


def test_partial_upload_keeps_earlier_files(admin_client, backend, flashes):
    """Files before the failing one stay in the draft; the failure is reported."""
    backend.storage.fail_after = 2

    admin_client.post("/admin/projects-editor/draft/images", data={
        "images": [_image("1.png"), _image("2.png"), _image("3.png"), _image("4.png")],
    }, content_type="multipart/form-data")

    assert len(_draft(admin_client)["images"]) == 2
    assert len(backend.storage.objects) == 2
    messages = [message for _, message in flashes()]
    assert any("Failed to upload 3.png" in m and "2 image(s)" in m for m in messages)


def test_invalid_extension_rejected_before_upload(admin_client, backend):
    admin_client.post("/admin/projects-editor/draft/images", data={
        "images": [_image("notes.txt")],
    }, content_type="multipart/form-data")

    assert backend.storage.objects == {}


def test_thumbnail_upload_sets_draft(admin_client, backend):
    admin_client.post("/admin/projects-editor/draft/thumbnail", data={
        "thumbnail": _image("cover.webp"),
    }, content_type="multipart/form-data")

    thumbnail_url = _draft(admin_client)["thumbnail_url"]
    assert "/thumb-" in thumbnail_url
    stored = next(iter(backend.storage.objects.values()))
    assert stored["options"]["content-type"] == "image/webp"


# ---------------------------------------------------------------------------
# JSON API
# ---------------------------------------------------------------------------

def test_api_create_returns_refetched_list(admin_client, categories):
    response = admin_client.post("/admin/projects-editor/api/projects", json={
        "title": "API project",
        "category_id": categories["website-development"]["id"],
    })

    data = response.get_json()
    assert response.status_code == 200
    assert data["success"] is True
    assert [p["title"] for p in data["projects"]] == ["API project"]
    assert data["projects"][0]["project_categories"]["slug"] == "website-development"


def test_api_create_missing_fields(admin_client):
    response = admin_client.post("/admin/projects-editor/api/projects", json={"title": "x"})

    assert response.status_code == 400
    assert response.get_json() == {"error": "Please fill in required fields", "missing": ["category_id"]}


def test_api_fetch_failure(admin_client, backend):
    backend.fail("select", "projects")

    response = admin_client.get("/admin/projects-editor/api/projects")

    assert response.status_code == 500
    assert response.get_json()["error"] == "Failed to fetch projects"


def test_api_get_missing_project(admin_client):
    response = admin_client.get("/admin/projects-editor/api/projects/999")

    assert response.status_code == 404


def test_api_toggle_rejects_unknown_flag(admin_client):
    response = admin_client.post("/admin/projects-editor/api/projects/1/toggle/title")

    assert response.status_code == 400


def test_api_partial_upload_reports_kept_urls(admin_client, backend):
    backend.storage.fail_after = 1

    response = admin_client.post("/admin/projects-editor/api/upload-images", data={
        "images": [_image("1.png"), _image("2.png")],
    }, content_type="multipart/form-data")

    data = response.get_json()
    assert response.status_code == 500
    assert data["failed"] == "2.png"
    assert len(data["image_urls"]) == 1


# ---------------------------------------------------------------------------
# End-to-end scenarios
# ---------------------------------------------------------------------------

def test_category_then_project_scenario(admin_client):
    """Create "Graphic Design", then a project in it; the listing joins the category."""
    category = admin_client.post("/admin/projects-editor/api/categories",
                                 json={"name": "Graphic Design"}).get_json()["category"]
    assert category["slug"] == "graphic-design"

    admin_client.post("/admin/projects-editor/api/projects", json={
        "title": "Logo Pack", "category_id": category["id"], "client_name": "Acme",
    })
    projects = admin_client.get("/admin/projects-editor/api/projects").get_json()

    assert projects[0]["project_categories"]["name"] == "Graphic Design"
    assert projects[0]["client_name"] == "Acme"


def test_home_limit_with_five_flagged(admin_client, app, backend, categories):
    """Toggle show_on_home on 5 projects; the home fetch returns the 4 newest of them."""
    ids = [backend.seed("projects", title=f"P{i}", show_on_home=False,
                        category_id=categories["graphic-design"]["id"])["id"] for i in range(1, 6)]
    for project_id in ids:
        admin_client.post(f"/admin/projects-editor/api/projects/{project_id}/toggle/show_on_home")

    with app.app_context():
        projects = fetch_home_projects()

    assert [p["title"] for p in projects] == ["P5", "P4", "P3", "P2"]


def test_deleted_id_absent_from_refetch(admin_client, backend, categories):
    keep = backend.seed("projects", title="Keep", category_id=categories["graphic-design"]["id"])
    gone = backend.seed("projects", title="Gone", category_id=categories["graphic-design"]["id"])

    data = admin_client.delete(f"/admin/projects-editor/api/projects/{gone['id']}").get_json()

    assert [p["id"] for p in data["projects"]] == [keep["id"]]
