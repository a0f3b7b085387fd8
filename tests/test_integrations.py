import pytest

from client_reporter.services.integrations import PROVIDERS, aggregate_status


def test_aggregate_status():
    ga = PROVIDERS["google-analytics"]
    assert aggregate_status(ga, 0, 3) == "disconnected"
    assert aggregate_status(ga, 1, 3) == "partial"
    assert aggregate_status(ga, 3, 3) == "connected"
    assert aggregate_status(ga, 0, 0) == "disconnected"
    assert aggregate_status(PROVIDERS["linkedin-ads"], 0, 3) == "coming_soon"


async def _connect(ac, client_id, provider, **payload):
    return await ac.put(f"/api/clients/{client_id}/integrations/{provider}", json=payload)


@pytest.mark.asyncio
async def test_catalog_aggregates_connections(auth_client):
    acme = (await auth_client.post("/api/clients", json={"name": "Acme"})).json()
    globex = (await auth_client.post("/api/clients", json={"name": "Globex"})).json()

    assert (await _connect(auth_client, acme["id"], "google-analytics", account_id="UA-1")).status_code == 200
    await _connect(auth_client, globex["id"], "google-analytics")
    await _connect(auth_client, acme["id"], "search-console")

    catalog = {p["id"]: p for p in (await auth_client.get("/api/integrations")).json()}

    assert list(catalog) == list(PROVIDERS)
    assert catalog["google-analytics"]["status"] == "connected"
    assert catalog["google-analytics"]["connected"] == 2
    assert catalog["search-console"]["status"] == "partial"
    assert (catalog["search-console"]["connected"], catalog["search-console"]["total"]) == (1, 2)
    assert catalog["google-ads"]["status"] == "disconnected"
    assert catalog["facebook-ads"]["status"] == "coming_soon"
    assert catalog["facebook-ads"]["total"] == 0


@pytest.mark.asyncio
async def test_reconnect_updates_existing(auth_client):
    acme = (await auth_client.post("/api/clients", json={"name": "Acme"})).json()
    first = (await _connect(auth_client, acme["id"], "google-ads", account_id="111")).json()
    second = (await _connect(auth_client, acme["id"], "google-ads", account_id="222")).json()

    assert first["id"] == second["id"]
    assert second["account_id"] == "222"
    listed = (await auth_client.get(f"/api/clients/{acme['id']}/integrations")).json()
    assert [i["provider"] for i in listed] == ["google-ads"]


@pytest.mark.asyncio
async def test_connect_rejects_unavailable_providers(auth_client):
    acme = (await auth_client.post("/api/clients", json={"name": "Acme"})).json()

    coming_soon = await _connect(auth_client, acme["id"], "facebook-ads")
    unknown = await _connect(auth_client, acme["id"], "myspace")

    assert coming_soon.status_code == 400
    assert coming_soon.json() == {"error": "Facebook Ads is coming soon"}
    assert unknown.status_code == 404
    assert unknown.json() == {"error": "Unknown integration provider"}


@pytest.mark.asyncio
async def test_disconnect(auth_client):
    acme = (await auth_client.post("/api/clients", json={"name": "Acme"})).json()
    await _connect(auth_client, acme["id"], "search-console")
    url = f"/api/clients/{acme['id']}/integrations/search-console"

    assert (await auth_client.delete(url)).status_code == 204
    again = await auth_client.delete(url)
    assert again.status_code == 404
    assert again.json() == {"error": "Integration not found"}
    assert (await auth_client.get(f"/api/clients/{acme['id']}/integrations")).json() == []
