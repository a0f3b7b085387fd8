import pytest

from client_reporter.services.templates import DEFAULT_TEMPLATES, seed_default_templates


@pytest.mark.asyncio
async def test_seed_is_idempotent(db_session):
    assert await seed_default_templates(db_session) == len(DEFAULT_TEMPLATES)
    assert await seed_default_templates(db_session) == 0


@pytest.mark.asyncio
async def test_list_shows_defaults_first(auth_client):
    created = await auth_client.post(
        "/api/templates",
        json={"name": "  Monthly Wrap-up ", "description": "", "sections": ["Summary", "Next Steps"]},
    )
    assert created.status_code == 201
    body = created.json()
    assert body["name"] == "Monthly Wrap-up"
    assert body["description"] is None
    assert body["category"] == "CUSTOM"
    assert body["is_default"] is False

    templates = (await auth_client.get("/api/templates")).json()
    assert [t["is_default"] for t in templates] == [True, True, True, False]
    assert templates[-1]["sections"] == ["Summary", "Next Steps"]


@pytest.mark.asyncio
async def test_template_name_required(auth_client):
    response = await auth_client.post("/api/templates", json={"name": "   "})
    assert response.status_code == 400
    assert response.json() == {"error": "Name must be at least 2 characters"}


@pytest.mark.asyncio
async def test_default_templates_cannot_be_deleted(auth_client):
    default = (await auth_client.get("/api/templates")).json()[0]

    response = await auth_client.delete(f"/api/templates/{default['id']}")

    assert response.status_code == 400
    assert response.json() == {"error": "Default templates cannot be deleted"}


@pytest.mark.asyncio
async def test_custom_templates_are_team_scoped(auth_client, register_user, login_user):
    custom = (await auth_client.post("/api/templates", json={"name": "Ada's Template"})).json()

    await register_user(auth_client, "Mallory", "mallory@example.com")
    await login_user(auth_client, "mallory@example.com")

    names = [t["name"] for t in (await auth_client.get("/api/templates")).json()]
    assert "Ada's Template" not in names

    response = await auth_client.delete(f"/api/templates/{custom['id']}")
    assert response.status_code == 404
    assert response.json() == {"error": "Template not found"}

    await login_user(auth_client, "ada@example.com")
    assert (await auth_client.delete(f"/api/templates/{custom['id']}")).status_code == 204
