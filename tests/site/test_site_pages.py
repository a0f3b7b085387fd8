import pytest


@pytest.mark.asyncio
async def test_home_page(site_client):
    response = await site_client.get("/")

    assert response.status_code == 200
    assert "Docker" in response.text
    assert "DevOps Hub" in response.text


@pytest.mark.asyncio
async def test_guides_index_skips_unlisted(site_client):
    response = await site_client.get("/guides")

    assert response.status_code == 200
    assert "/guides/docker" in response.text
    assert "Unlisted" not in response.text


@pytest.mark.asyncio
async def test_guide_page(site_client):
    response = await site_client.get("/guides/docker")

    assert response.status_code == 200
    assert "Docker Complete Guide" in response.text
    assert 'href="#layers-caching"' in response.text
    assert '<h2 id="images-1">' in response.text


@pytest.mark.asyncio
async def test_missing_pages_render_not_found(site_client):
    guide = await site_client.get("/guides/linux")
    project = await site_client.get("/projects/01-beginner/missing")

    assert guide.status_code == 404
    assert "Guide not found" in guide.text
    assert project.status_code == 404
    assert "Project not found" in project.text


@pytest.mark.asyncio
async def test_projects_level_filter(site_client):
    everything = await site_client.get("/projects")
    advanced = await site_client.get("/projects", params={"level": "advanced"})

    assert "Deploy a Static Site" in everything.text
    assert "No projects at this level yet." in everything.text
    assert "GitOps Pipeline" in advanced.text
    assert "Deploy a Static Site" not in advanced.text


@pytest.mark.asyncio
async def test_project_page(site_client):
    response = await site_client.get("/projects/01-beginner/static-site")

    assert response.status_code == 200
    assert "Deploy a Static Site" in response.text
    assert "A site served over HTTPS" in response.text
    assert 'id="steps"' in response.text


@pytest.mark.asyncio
async def test_roadmap(site_client):
    response = await site_client.get("/roadmap")

    assert response.status_code == 200
    assert "Platform Engineer!" in response.text
    assert "Kubernetes Basics" in response.text


@pytest.mark.asyncio
async def test_health(site_client):
    assert (await site_client.get("/health")).json() == {"status": "ok"}
