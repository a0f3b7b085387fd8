from datetime import date

import pytest
from sqlalchemy import func, select

from client_reporter.models import Client, Integration, Report


@pytest.mark.asyncio
async def test_clients_require_session(client):
    list_response = await client.get("/api/clients")
    create_response = await client.post("/api/clients", json={"name": "Acme"})

    assert list_response.status_code == 401
    assert create_response.status_code == 401
    assert create_response.json() == {"error": "Unauthorized"}


@pytest.mark.asyncio
async def test_clients_require_team(client, make_user, login_user):
    await make_user("loner@example.com")
    await login_user(client, "loner@example.com")

    response = await client.post("/api/clients", json={"name": "Acme"})

    assert response.status_code == 404
    assert response.json() == {"error": "No team found"}


@pytest.mark.asyncio
async def test_create_and_list_clients(auth_client):
    first = await auth_client.post(
        "/api/clients",
        json={
            "name": "  Acme Corp ",
            "email": "Hello@Acme.io",
            "website": "https://acme.io",
            "industry": "",
            "description": "",
        },
    )
    assert first.status_code == 201
    created = first.json()
    assert created["name"] == "Acme Corp"
    assert created["email"] == "hello@acme.io"
    assert created["industry"] is None
    assert created["description"] is None

    second = await auth_client.post("/api/clients", json={"name": "Globex"})
    assert second.status_code == 201

    response = await auth_client.get("/api/clients")
    assert response.status_code == 200
    clients = response.json()
    assert [c["name"] for c in clients] == ["Globex", "Acme Corp"]
    assert clients[0]["integrations"] == []
    assert clients[0]["_count"] == {"reports": 0}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload, message",
    [
        ({"name": "A"}, "Name must be at least 2 characters"),
        ({"name": "Acme", "email": "nope"}, "Invalid email address"),
        ({"name": "Acme", "website": "not a url"}, "Invalid url"),
    ],
)
async def test_create_client_validation(auth_client, payload, message):
    response = await auth_client.post("/api/clients", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": message}


@pytest.mark.asyncio
async def test_clients_are_scoped_to_team(auth_client, register_user, login_user):
    acme = (await auth_client.post("/api/clients", json={"name": "Acme"})).json()

    await register_user(auth_client, "Mallory", "mallory@example.com")
    await login_user(auth_client, "mallory@example.com")

    assert (await auth_client.get("/api/clients")).json() == []
    response = await auth_client.get(f"/api/clients/{acme['id']}")
    assert response.status_code == 404
    assert response.json() == {"error": "Client not found"}
    assert (await auth_client.delete(f"/api/clients/{acme['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_update_client(auth_client):
    acme = (await auth_client.post("/api/clients", json={"name": "Acme", "industry": "Retail"})).json()

    response = await auth_client.patch(
        f"/api/clients/{acme['id']}",
        json={"website": "https://acme.example.org", "industry": ""},
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["name"] == "Acme"
    assert updated["website"] == "https://acme.example.org"
    assert updated["industry"] is None


@pytest.mark.asyncio
async def test_delete_client_cascades(auth_client, db_session):
    acme = (await auth_client.post("/api/clients", json={"name": "Acme"})).json()
    await auth_client.put(f"/api/clients/{acme['id']}/integrations/google-analytics", json={})
    db_session.add(
        Report(
            client_id=acme["id"],
            name="Acme Report",
            date_from=date(2025, 1, 1),
            date_to=date(2025, 1, 31),
        )
    )
    await db_session.commit()

    detail = await auth_client.get(f"/api/clients/{acme['id']}")
    assert detail.json()["_count"] == {"reports": 1}

    response = await auth_client.delete(f"/api/clients/{acme['id']}")
    assert response.status_code == 204

    for model in (Client, Report, Integration):
        assert await db_session.scalar(select(func.count()).select_from(model)) == 0
