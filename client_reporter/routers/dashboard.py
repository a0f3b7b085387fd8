from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from client_reporter.core.db import get_session
from client_reporter.core.errors import first_error_message
from client_reporter.core.logging import log_auth, log_payload, log_warning
from client_reporter.core.security import end_session, start_session
from client_reporter.models import ReportStatus, TeamMember, User
from client_reporter.routers.deps import get_optional_user
from client_reporter.schemas.auth import RegisterRequest
from client_reporter.schemas.clients import ClientCreate
from client_reporter.schemas.reports import ReportCreate
from client_reporter.schemas.teams import ProfileUpdate, TeamUpdate
from client_reporter.schemas.templates import TemplateCreate
from client_reporter.services.accounts import AccountService
from client_reporter.services.clients import ClientService
from client_reporter.services.dashboard import DashboardService
from client_reporter.services.integrations import IntegrationService
from client_reporter.services.reports import WIZARD_STEPS, ReportService, ReportWizard
from client_reporter.services.teams import TeamService
from client_reporter.services.templates import TemplateService
from client_reporter.utils.formatting import JINJA_FILTERS

router = APIRouter(include_in_schema=False)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))
templates.env.filters.update(JINJA_FILTERS)

logger = logging.getLogger("client_reporter.web")

NAV_ITEMS = [
    ("Overview", "/dashboard"),
    ("Clients", "/dashboard/clients"),
    ("Reports", "/dashboard/reports"),
    ("Templates", "/dashboard/templates"),
    ("Integrations", "/dashboard/integrations"),
    ("Settings", "/dashboard/settings"),
]


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def _form_error(exc: ValidationError | HTTPException) -> str:
    if isinstance(exc, ValidationError):
        return first_error_message(exc.errors())
    return str(exc.detail)


async def _membership(db: AsyncSession, user: Optional[User]) -> Optional[TeamMember]:
    if not user:
        return None
    return await AccountService(db).get_membership(user.id)


def _render(
    request: Request,
    name: str,
    user: User,
    membership: TeamMember,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = status.HTTP_200_OK,
):
    page = {
        "user": user,
        "team": membership.team,
        "membership": membership,
        "nav_items": NAV_ITEMS,
        "active_path": request.url.path,
        "error": None,
    }
    page.update(context or {})
    return templates.TemplateResponse(request, name, page, status_code=status_code)


# =========================
# Auth pages
# =========================

@router.get("/", response_class=HTMLResponse)
async def root(user: Optional[User] = Depends(get_optional_user)):
    return _redirect("/dashboard" if user else "/login")


@router.get("/login", response_class=HTMLResponse)
async def login_form(request: Request, user: Optional[User] = Depends(get_optional_user)):
    if user:
        return _redirect("/dashboard")
    return templates.TemplateResponse(request, "login.html", {"error": None, "email": ""})


@router.post("/login", response_class=HTMLResponse)
async def login(request: Request, db: AsyncSession = Depends(get_session)):
    form = await request.form()
    log_payload(logger, dict(form), "Login form")
    email = (form.get("email") or "").strip()
    password = form.get("password") or ""

    try:
        user = await AccountService(db).authenticate(email, password)
    except HTTPException as exc:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": exc.detail, "email": email},
            status_code=exc.status_code,
        )

    start_session(request, user)
    return _redirect("/dashboard")


@router.get("/register", response_class=HTMLResponse)
async def register_form(request: Request, user: Optional[User] = Depends(get_optional_user)):
    if user:
        return _redirect("/dashboard")
    return templates.TemplateResponse(request, "register.html", {"error": None, "name": "", "email": ""})


@router.post("/register", response_class=HTMLResponse)
async def register(request: Request, db: AsyncSession = Depends(get_session)):
    form = await request.form()
    log_payload(logger, dict(form), "Register form")
    name = (form.get("name") or "").strip()
    email = (form.get("email") or "").strip()

    try:
        payload = RegisterRequest(name=name, email=email, password=form.get("password") or "")
        if payload.password != (form.get("confirm_password") or ""):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Passwords do not match")
        user = await AccountService(db).register(payload.name, payload.email, payload.password)
    except (ValidationError, HTTPException) as exc:
        return templates.TemplateResponse(
            request,
            "register.html",
            {"error": _form_error(exc), "name": name, "email": email},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    start_session(request, user)
    return _redirect("/dashboard")


@router.post("/logout")
async def logout(request: Request):
    end_session(request)
    log_auth(logger, "Signed out from dashboard")
    return _redirect("/login")


# =========================
# Dashboard
# =========================

@router.get("/dashboard", response_class=HTMLResponse)
async def overview(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    membership = await _membership(db, user)
    if not membership:
        return _redirect("/login")

    reports = await ReportService(db, membership.team_id).list_reports()
    return _render(
        request,
        "dashboard/index.html",
        user,
        membership,
        {
            "stats": await DashboardService(db, membership.team_id).stats(),
            "recent_reports": [ReportService.to_list_item(r) for r in reports[:5]],
        },
    )


@router.get("/dashboard/clients", response_class=HTMLResponse)
async def clients_page(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    membership = await _membership(db, user)
    if not membership:
        return _redirect("/login")

    clients = await ClientService(db, membership.team_id).list_clients()
    return _render(request, "dashboard/clients.html", user, membership, {"clients": clients})


@router.get("/dashboard/clients/new", response_class=HTMLResponse)
async def new_client_form(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    membership = await _membership(db, user)
    if not membership:
        return _redirect("/login")
    return _render(request, "dashboard/client_new.html", user, membership, {"form": {}})


@router.post("/dashboard/clients/new", response_class=HTMLResponse)
async def create_client(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    membership = await _membership(db, user)
    if not membership:
        return _redirect("/login")

    form = {k: (v or "").strip() for k, v in (await request.form()).items()}
    try:
        payload = ClientCreate(**form)
    except ValidationError as exc:
        return _render(
            request,
            "dashboard/client_new.html",
            user,
            membership,
            {"form": form, "error": _form_error(exc)},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    await ClientService(db, membership.team_id).create_client(payload.model_dump())
    return _redirect("/dashboard/clients")


@router.post("/dashboard/clients/{client_id}/delete")
async def delete_client(
    client_id: str,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    membership = await _membership(db, user)
    if not membership:
        return _redirect("/login")
    await ClientService(db, membership.team_id).delete_client(client_id)
    return _redirect("/dashboard/clients")


@router.get("/dashboard/reports", response_class=HTMLResponse)
async def reports_page(
    request: Request,
    status_filter: Optional[str] = Query(None, alias="status"),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    membership = await _membership(db, user)
    if not membership:
        return _redirect("/login")

    if status_filter not in {s.value for s in ReportStatus}:
        status_filter = None
    reports = await ReportService(db, membership.team_id).list_reports(status_filter)
    return _render(
        request,
        "dashboard/reports.html",
        user,
        membership,
        {
            "reports": [ReportService.to_list_item(r) for r in reports],
            "statuses": [s.value for s in ReportStatus],
            "status_filter": status_filter,
        },
    )


async def _render_wizard(
    request: Request,
    db: AsyncSession,
    user: User,
    membership: TeamMember,
    wizard: ReportWizard,
    status_code: int = status.HTTP_200_OK,
):
    clients = await ClientService(db, membership.team_id).list_clients()
    report_templates = await TemplateService(db, membership.team_id).list_templates()
    return _render(
        request,
        "dashboard/report_new.html",
        user,
        membership,
        {
            "wizard": wizard,
            "steps": WIZARD_STEPS,
            "clients": clients,
            "report_templates": report_templates,
            "selected_client": next((c for c in clients if c.id == wizard.client_id), None),
            "selected_template": next((t for t in report_templates if t.id == wizard.template_id), None),
            "error": wizard.errors[0] if wizard.errors else None,
        },
        status_code=status_code,
    )


@router.get("/dashboard/reports/new", response_class=HTMLResponse)
async def new_report_wizard(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    membership = await _membership(db, user)
    if not membership:
        return _redirect("/login")

    wizard = ReportWizard.from_form(dict(request.query_params)).clamp()
    return await _render_wizard(request, db, user, membership, wizard)


@router.post("/dashboard/reports/new", response_class=HTMLResponse)
async def submit_report_wizard(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    membership = await _membership(db, user)
    if not membership:
        return _redirect("/login")

    form = dict(await request.form())
    wizard = ReportWizard.from_form(form)
    action = form.get("action") or "next"

    if action == "prev":
        return await _render_wizard(request, db, user, membership, wizard.prev())
    if action != "submit":
        return await _render_wizard(request, db, user, membership, wizard.next())

    if not wizard.can_submit():
        wizard.clamp()
        wizard.errors = wizard.step_errors()
        return await _render_wizard(
            request, db, user, membership, wizard, status_code=status.HTTP_400_BAD_REQUEST
        )

    try:
        payload = ReportCreate(**wizard.as_payload())
        await ReportService(db, membership.team_id).create_report(
            payload.model_dump(), created_by_id=user.id
        )
    except (ValidationError, HTTPException) as exc:
        wizard.errors = [_form_error(exc)]
        log_warning(logger, f"Report wizard submit rejected: {wizard.errors[0]}")
        return await _render_wizard(
            request, db, user, membership, wizard, status_code=status.HTTP_400_BAD_REQUEST
        )

    return _redirect("/dashboard/reports")


@router.get("/dashboard/templates", response_class=HTMLResponse)
async def templates_page(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    membership = await _membership(db, user)
    if not membership:
        return _redirect("/login")

    report_templates = await TemplateService(db, membership.team_id).list_templates()
    return _render(
        request, "dashboard/templates.html", user, membership, {"report_templates": report_templates}
    )


@router.post("/dashboard/templates", response_class=HTMLResponse)
async def create_template(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    membership = await _membership(db, user)
    if not membership:
        return _redirect("/login")

    form = await request.form()
    service = TemplateService(db, membership.team_id)
    try:
        payload = TemplateCreate(
            name=(form.get("name") or "").strip(),
            description=form.get("description"),
            category=form.get("category") or "CUSTOM",
            sections=[s.strip() for s in (form.get("sections") or "").split(",") if s.strip()],
        )
    except ValidationError as exc:
        return _render(
            request,
            "dashboard/templates.html",
            user,
            membership,
            {"report_templates": await service.list_templates(), "error": _form_error(exc)},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    await service.create_template(payload.model_dump(mode="json"))
    return _redirect("/dashboard/templates")


@router.get("/dashboard/integrations", response_class=HTMLResponse)
async def integrations_page(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    membership = await _membership(db, user)
    if not membership:
        return _redirect("/login")

    providers = await IntegrationService(db, membership.team_id).catalog()
    return _render(request, "dashboard/integrations.html", user, membership, {"providers": providers})


async def _render_settings(request, db, user, membership, error=None, notice=None, status_code=200):
    team = await TeamService(db, membership).read_team()
    return _render(
        request,
        "dashboard/settings.html",
        user,
        membership,
        {"team_info": team, "error": error, "notice": notice},
        status_code=status_code,
    )


@router.get("/dashboard/settings", response_class=HTMLResponse)
async def settings_page(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    membership = await _membership(db, user)
    if not membership:
        return _redirect("/login")
    return await _render_settings(request, db, user, membership)


@router.post("/dashboard/settings/profile", response_class=HTMLResponse)
async def update_profile(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    membership = await _membership(db, user)
    if not membership:
        return _redirect("/login")

    form = await request.form()
    try:
        payload = ProfileUpdate(
            name=(form.get("name") or "").strip() or None,
            email=(form.get("email") or "").strip() or None,
            company=form.get("company"),
        )
        await AccountService(db).update_profile(user, payload.model_dump())
    except (ValidationError, HTTPException) as exc:
        return await _render_settings(
            request, db, user, membership, error=_form_error(exc), status_code=status.HTTP_400_BAD_REQUEST
        )
    return await _render_settings(request, db, user, membership, notice="Profile updated")


@router.post("/dashboard/settings/team", response_class=HTMLResponse)
async def update_team(
    request: Request,
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    membership = await _membership(db, user)
    if not membership:
        return _redirect("/login")

    form = await request.form()
    try:
        payload = TeamUpdate(
            name=(form.get("name") or "").strip() or None,
            brand_color=form.get("brand_color"),
            logo_url=form.get("logo_url"),
        )
        await TeamService(db, membership).update_team(payload.model_dump())
    except (ValidationError, HTTPException) as exc:
        return await _render_settings(
            request, db, user, membership, error=_form_error(exc), status_code=status.HTTP_400_BAD_REQUEST
        )
    return await _render_settings(request, db, user, membership, notice="Team updated")
