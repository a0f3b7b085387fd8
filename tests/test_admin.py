import pytest

from client_reporter.admin import AdminAuth, authentication_backend
from client_reporter.admin.views import ADMIN_VIEWS


def _request(mocker, form=None, session=None):
    request = mocker.Mock()
    request.form = mocker.AsyncMock(return_value=form or {})
    request.session = session if session is not None else {}
    return request


@pytest.mark.asyncio
async def test_admin_login_accepts_configured_credentials(mocker):
    request = _request(mocker, form={"username": "admin", "password": "admin-pass"})

    assert await authentication_backend.login(request) is True
    assert request.session["admin_token"]
    assert await authentication_backend.authenticate(request) is True


@pytest.mark.asyncio
async def test_admin_login_rejects_bad_password(mocker):
    request = _request(mocker, form={"username": "admin", "password": "guess"})

    assert await authentication_backend.login(request) is False
    assert "admin_token" not in request.session
    assert await authentication_backend.authenticate(request) is False


@pytest.mark.asyncio
async def test_admin_logout_keeps_dashboard_session(mocker):
    session = {"admin_token": "abc", "user_id": "u1"}
    request = _request(mocker, session=session)

    assert await AdminAuth(secret_key="x").logout(request) is True
    assert session == {"user_id": "u1"}


def test_every_model_has_a_view():
    names = {view.model.__name__ for view in ADMIN_VIEWS}
    assert names == {"User", "Team", "TeamMember", "Client", "Integration", "Template", "Report"}
