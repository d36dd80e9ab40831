import sys
from pathlib import Path

import pytest
from werkzeug.http import parse_options_header

sys.path.append(str(Path(__file__).resolve().parents[1]))

from chaptersmith import create_app
from chaptersmith.config import TestConfig
from chaptersmith.extensions import db
from chaptersmith.models import Chapter, Project

OUTLINE = """Emma crashes a charity gala and spills champagne on Dante Moretti.

Dante offers Emma a contract to pose as his fiancee.

Emma learns her father owes the Moretti family money."""


def _words(count: int) -> str:
    return " ".join(["word"] * count)


@pytest.fixture
def app_instance():
    app = create_app(TestConfig)
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    yield app
    db.session.remove()
    db.drop_all()
    ctx.pop()


@pytest.fixture
def client(app_instance):
    return app_instance.test_client()


def _create(client, **overrides):
    payload = {
        "title": "Broken Vows",
        "outline": OUTLINE,
        "chapter_count": 3,
        "pov_mode": "dual",
        "genre": "billionaire",
    }
    payload.update(overrides)
    return client.post("/api/projects", json=payload)


def test_create_project_returns_empty_chapters(client):
    response = _create(client)

    assert response.status_code == 201
    data = response.get_json()
    assert data["id"]
    assert data["chapter_count"] == 3
    assert data["pov_mode"] == "dual"
    assert [chapter["status"] for chapter in data["chapters"]] == ["empty", "empty", "empty"]
    assert Chapter.query.count() == 3


@pytest.mark.parametrize(
    "overrides, code, field",
    [
        ({"chapter_count": 7}, "invalid_chapter_count", "chapter_count"),
        ({"chapter_count": 2}, "invalid_chapter_count", "chapter_count"),
        ({"pov_mode": "third"}, "invalid_pov_mode", "pov_mode"),
        ({"genre": "space opera"}, "invalid_genre", "genre"),
        ({"outline": "   "}, "invalid_outline", "outline"),
    ],
)
def test_create_project_validation(client, overrides, code, field):
    response = _create(client, **overrides)

    assert response.status_code == 400
    data = response.get_json()
    assert data["code"] == code
    assert data["field"] == field
    assert data["kind"] == "validation"
    assert Project.query.count() == 0


def test_create_project_requires_json(client):
    response = client.post("/api/projects", data="outline=nope")

    assert response.status_code == 400
    assert response.get_json()["code"] == "invalid_payload"


def test_create_project_defaults(client):
    response = client.post("/api/projects", json={"outline": OUTLINE, "chapter_count": "4"})

    assert response.status_code == 201
    data = response.get_json()
    assert data["pov_mode"] == "female"
    assert data["genre"] == "general"
    assert data["title"] == ""
    assert len(data["chapters"]) == 4


def test_read_update_and_list_projects(client):
    project_id = _create(client).get_json()["id"]

    response = client.put(f"/api/projects/{project_id}", json={"title": "Gilded Cage"})
    assert response.status_code == 200
    assert response.get_json()["title"] == "Gilded Cage"

    assert client.get(f"/api/projects/{project_id}").get_json()["title"] == "Gilded Cage"
    listing = client.get("/api/projects").get_json()
    assert [entry["id"] for entry in listing] == [project_id]


def test_update_rejects_immutable_changes(client):
    project_id = _create(client).get_json()["id"]

    response = client.patch(f"/api/projects/{project_id}", json={"chapter_count": 5})
    assert response.status_code == 400
    assert response.get_json()["code"] == "immutable_field"

    same_values = client.patch(
        f"/api/projects/{project_id}",
        json={"chapter_count": 3, "pov_mode": "dual", "title": "Same Shape"},
    )
    assert same_values.status_code == 200
    assert same_values.get_json()["title"] == "Same Shape"


def test_unknown_project_is_404(client):
    response = client.get("/api/projects/999")

    assert response.status_code == 404
    assert response.get_json()["code"] == "project_not_found"


def test_delete_project_cascades(client):
    project_id = _create(client).get_json()["id"]

    response = client.delete(f"/api/projects/{project_id}")

    assert response.status_code == 200
    assert Chapter.query.count() == 0
    assert client.get(f"/api/projects/{project_id}/chapters").status_code == 404
    assert client.get(f"/api/projects/{project_id}/chapters/1").status_code == 404
    assert client.delete(f"/api/projects/{project_id}").status_code == 404


def test_prepare_chapter_plan(client):
    project_id = _create(client).get_json()["id"]

    response = client.post(
        "/api/chapters/prepare",
        json={"project_id": project_id, "number": 2, "override_pov": None},
    )

    assert response.status_code == 200
    plan = response.get_json()
    assert plan["resolved_pov"] == "male"
    assert plan["number"] == 2
    assert "Chapter 2 of 3" in plan["user_prompt"]
    assert "Billionaire Romance" in plan["system_rules"]
    assert plan["chapter_title"]


def test_prepare_out_of_range(client):
    project_id = _create(client).get_json()["id"]

    response = client.post("/api/chapters/prepare", json={"project_id": project_id, "number": 4})

    assert response.status_code == 400
    assert response.get_json()["code"] == "chapter_number_out_of_range"


def test_prepare_unknown_project(client):
    response = client.post("/api/chapters/prepare", json={"project_id": 321, "number": 1})

    assert response.status_code == 404


def test_save_chapter_reports_word_count(client):
    project_id = _create(client).get_json()["id"]

    response = client.post(
        "/api/chapters/save",
        json={
            "project_id": project_id,
            "number": "1",
            "title": "The Gala",
            "content": _words(500),
            "pov_used": "female",
        },
    )

    assert response.status_code == 200
    data = response.get_json()
    assert data["word_count"] == 500
    assert data["in_range"] is False
    assert data["warnings"][0]["code"] == "word_count_out_of_range"
    assert data["chapter"]["status"] == "saved"


def test_save_empty_content_is_rejected(client):
    project_id = _create(client).get_json()["id"]

    response = client.post(
        "/api/chapters/save",
        json={"project_id": project_id, "number": 1, "title": "The Gala", "content": "  "},
    )

    assert response.status_code == 400
    assert response.get_json()["code"] == "empty_content"
    chapters = client.get(f"/api/projects/{project_id}/chapters").get_json()
    assert chapters[0]["status"] == "empty"


def test_save_requires_number(client):
    project_id = _create(client).get_json()["id"]

    response = client.post(
        "/api/chapters/save",
        json={"project_id": project_id, "content": _words(10)},
    )

    assert response.status_code == 400
    assert response.get_json()["field"] == "number"


def test_end_to_end_dual_project(client):
    project_id = _create(client).get_json()["id"]

    first = client.post("/api/chapters/prepare", json={"project_id": project_id, "number": 1}).get_json()
    second = client.post("/api/chapters/prepare", json={"project_id": project_id, "number": 2}).get_json()
    assert first["resolved_pov"] == "female"
    assert second["resolved_pov"] == "male"

    saved = client.post(
        "/api/chapters/save",
        json={
            "project_id": project_id,
            "number": 1,
            "title": first["chapter_title"],
            "content": _words(1600),
            "pov_used": first["resolved_pov"],
        },
    ).get_json()
    assert saved["word_count"] == 1600
    assert saved["in_range"] is True

    chapters = client.get(f"/api/projects/{project_id}/chapters").get_json()
    assert [(c["number"], c["status"]) for c in chapters] == [(1, "saved"), (2, "empty"), (3, "empty")]
    assert chapters[0]["pov_used"] == "female"

    detail = client.get(f"/api/projects/{project_id}/chapters/1").get_json()
    assert detail["content"] == _words(1600)

    export = client.get(f"/api/projects/{project_id}/export").get_json()
    assert export["filename"] == "broken-vows.md"
    assert export["chapter_numbers"] == [1]
    assert export["missing_chapters"] == [2, 3]
    assert export["content"].startswith(f"Chapter 1: {first['chapter_title']}\n\n")
    assert "Chapter 2:" not in export["content"]


def test_export_download(client):
    project_id = _create(client, title="").get_json()["id"]
    client.post(
        "/api/chapters/save",
        json={"project_id": project_id, "number": 1, "title": "Start", "content": "Hello there."},
    )

    response = client.get(f"/api/projects/{project_id}/export?download=1")

    assert response.status_code == 200
    assert response.mimetype == "text/markdown"
    disposition, options = parse_options_header(response.headers["Content-Disposition"])
    assert disposition == "attachment"
    assert options["filename"] == "manuscript.md"
    assert response.get_data(as_text=True) == "Chapter 1: Start\n\nHello there.\n"


def test_health_endpoint(client):
    for path in ("/api/health", "/test"):
        response = client.get(path)
        assert response.status_code == 200
        data = response.get_json()
        assert data["database"] == "ok"
        assert data["word_count_policy"] == {"minimum": 1400, "maximum": 1800, "strict": False}


def test_unknown_route_returns_json(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.get_json()["kind"] == "http"


@pytest.mark.parametrize("chapter_count", ["²", "³", "3.0", "-3"])
def test_create_project_rejects_non_decimal_counts(client, chapter_count):
    response = _create(client, chapter_count=chapter_count)

    assert response.status_code == 400
    data = response.get_json()
    assert data["code"] == "invalid_chapter_count"
    assert data["field"] == "chapter_count"


@pytest.mark.parametrize("endpoint", ["/api/chapters/save", "/api/chapters/prepare"])
def test_chapter_routes_reject_superscript_numbers(client, endpoint):
    project_id = _create(client).get_json()["id"]

    response = client.post(
        endpoint,
        json={"project_id": project_id, "number": "³", "title": "The Gala", "content": _words(10)},
    )

    assert response.status_code == 400
    data = response.get_json()
    assert data["code"] == "invalid_chapter_number"
    assert data["field"] == "number"


def test_export_download_escapes_configured_filename(app_instance, client):
    app_instance.config["DEFAULT_MANUSCRIPT_FILENAME"] = 'draft "final" ñ.md'
    project_id = _create(client, title="").get_json()["id"]
    client.post(
        "/api/chapters/save",
        json={"project_id": project_id, "number": 1, "title": "Start", "content": "Hello there."},
    )

    response = client.get(f"/api/projects/{project_id}/export?download=1")

    assert response.status_code == 200
    disposition = response.headers["Content-Disposition"]
    assert disposition.startswith("attachment;")
    assert "filename*=UTF-8''draft%20%22final%22%20%C3%B1.md" in disposition
    assert 'filename="draft "final"' not in disposition
