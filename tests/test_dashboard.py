from datetime import datetime, timezone

import pytest
from sqlalchemy import select

from client_reporter.models import Report, Template
from client_reporter.services.dashboard import StatCard, month_bounds


def test_month_bounds_wraps_year():
    this_month, last_month = month_bounds(datetime(2025, 1, 17, 9, 30, tzinfo=timezone.utc))
    assert this_month == datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert last_month == datetime(2024, 12, 1, tzinfo=timezone.utc)


def test_stat_card_display():
    card = StatCard("Total Clients", 1250, -12.5)
    assert card.display_value == "1,250"
    assert card.display_change == "-12.5%"
    assert card.trend == "down"
    assert StatCard("Reports", 0, 0.0).trend == "up"


@pytest.mark.asyncio
async def test_pages_redirect_to_login_without_session(client):
    for path in ("/", "/dashboard", "/dashboard/clients", "/dashboard/reports/new"):
        response = await client.get(path)
        assert response.status_code == 303, path
        assert response.headers["location"] == "/login"


@pytest.mark.asyncio
async def test_form_login_and_logout(client, default_templates, register_user):
    await register_user(client, "Ada Lovelace", "ada@example.com")

    bad = await client.post("/login", data={"email": "ada@example.com", "password": "nope"})
    assert bad.status_code == 401
    assert "Invalid credentials" in bad.text

    good = await client.post("/login", data={"email": "ada@example.com", "password": "correct-horse"})
    assert good.status_code == 303
    assert good.headers["location"] == "/dashboard"

    page = await client.get("/dashboard")
    assert page.status_code == 200
    assert "Total Clients" in page.text

    await client.post("/logout")
    assert (await client.get("/dashboard")).headers["location"] == "/login"


@pytest.mark.asyncio
async def test_form_register_checks_confirmation(client, default_templates):
    response = await client.post(
        "/register",
        data={
            "name": "Ada",
            "email": "ada@example.com",
            "password": "correct-horse",
            "confirm_password": "battery-staple",
        },
    )
    assert response.status_code == 400
    assert "Passwords do not match" in response.text

    created = await client.post(
        "/register",
        data={
            "name": "Ada",
            "email": "ada@example.com",
            "password": "correct-horse",
            "confirm_password": "correct-horse",
        },
    )
    assert created.status_code == 303
    assert (await client.get("/dashboard/settings")).status_code == 200


@pytest.mark.asyncio
async def test_create_client_form(auth_client):
    invalid = await auth_client.post("/dashboard/clients/new", data={"name": "A", "email": "nope"})
    assert invalid.status_code == 400
    assert "Name must be at least 2 characters" in invalid.text

    created = await auth_client.post(
        "/dashboard/clients/new", data={"name": "Acme", "email": "", "website": ""}
    )
    assert created.status_code == 303
    page = await auth_client.get("/dashboard/clients")
    assert "Acme" in page.text


@pytest.mark.asyncio
async def test_wizard_deep_link_is_clamped(auth_client):
    response = await auth_client.get("/dashboard/reports/new", params={"step": "4"})

    assert response.status_code == 200
    assert "Select client" in response.text
    assert "Create report</button>" not in response.text


@pytest.mark.asyncio
async def test_wizard_steps_and_submit(auth_client, db_session):
    acme = (await auth_client.post("/api/clients", json={"name": "Acme"})).json()
    template_id = await db_session.scalar(select(Template.id).where(Template.name == "Paid Ads Report"))

    missing_client = await auth_client.post("/dashboard/reports/new", data={"step": "1", "action": "next"})
    assert "Please select a client" in missing_client.text

    step_two = await auth_client.post(
        "/dashboard/reports/new", data={"step": "1", "client_id": acme["id"], "action": "next"}
    )
    assert "Date range" in step_two.text

    back = await auth_client.post(
        "/dashboard/reports/new", data={"step": "2", "client_id": acme["id"], "action": "prev"}
    )
    assert "Select client" in back.text

    submitted = await auth_client.post(
        "/dashboard/reports/new",
        data={
            "step": "4",
            "client_id": acme["id"],
            "date_from": "2025-02-01",
            "date_to": "2025-02-28",
            "template_id": template_id,
            "name": "",
            "action": "submit",
        },
    )
    assert submitted.status_code == 303
    assert submitted.headers["location"] == "/dashboard/reports"

    report = await db_session.scalar(select(Report))
    assert report.name == "Acme Report – Feb 2025"
    assert report.template_id == template_id

    listing = await auth_client.get("/dashboard/reports", params={"status": "draft"})
    assert "Acme Report – Feb 2025" in listing.text


@pytest.mark.asyncio
async def test_wizard_submit_with_gaps_goes_back(auth_client):
    acme = (await auth_client.post("/api/clients", json={"name": "Acme"})).json()

    response = await auth_client.post(
        "/dashboard/reports/new",
        data={"step": "4", "client_id": acme["id"], "action": "submit"},
    )

    assert response.status_code == 400
    assert "Please choose a start and end date" in response.text


@pytest.mark.asyncio
async def test_settings_team_form(auth_client):
    response = await auth_client.post(
        "/dashboard/settings/team", data={"name": "Engines Ltd", "brand_color": "#000000", "logo_url": ""}
    )
    assert response.status_code == 200
    assert "Team updated" in response.text
    assert (await auth_client.get("/api/team")).json()["name"] == "Engines Ltd"

    bad = await auth_client.post("/dashboard/settings/team", data={"name": "Engines", "logo_url": "not a url"})
    assert bad.status_code == 400
    assert "Invalid url" in bad.text


@pytest.mark.asyncio
async def test_form_register_rejects_blank_confirmation(client, default_templates):
    response = await client.post(
        "/register",
        data={"name": "Ada", "email": "ada@example.com", "password": "correct-horse", "confirm_password": ""},
    )

    assert response.status_code == 400
    assert "Passwords do not match" in response.text
    assert (await client.get("/dashboard")).headers["location"] == "/login"


@pytest.mark.asyncio
async def test_settings_pages_with_a_session_per_request(fresh_session_client):
    ac = fresh_session_client
    created = await ac.post(
        "/register",
        data={
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "password": "correct-horse",
            "confirm_password": "correct-horse",
        },
    )
    assert created.status_code == 303

    page = await ac.get("/dashboard/settings")
    assert page.status_code == 200
    assert "ada@example.com" in page.text

    profile = await ac.post("/dashboard/settings/profile", data={"name": "Ada King", "email": "", "company": ""})
    assert profile.status_code == 200
    assert "Profile updated" in profile.text

    team = await ac.post("/dashboard/settings/team", data={"name": "Engines Ltd", "logo_url": ""})
    assert team.status_code == 200
    assert "Team updated" in team.text
    assert "Engines Ltd" in (await ac.get("/dashboard")).text
