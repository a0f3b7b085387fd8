import logging
import secrets

from sqladmin import Admin, ModelView
from sqladmin.authentication import AuthenticationBackend
from starlette.requests import Request

from client_reporter.core.config import settings
from client_reporter.core.logging import log_auth, log_warning
from client_reporter.models import Client, Integration, Report, Team, TeamMember, Template, User

logger = logging.getLogger(__name__)


class AdminAuth(AuthenticationBackend):
    async def login(self, request: Request) -> bool:
        form = await request.form()
        username, password = form.get("username") or "", form.get("password") or ""

        # Basic env-based auth
        if secrets.compare_digest(username, settings.ADMIN_USER) and secrets.compare_digest(
            password, settings.ADMIN_PASSWORD
        ):
            request.session.update({"admin_token": secrets.token_urlsafe(16)})
            log_auth(logger, f"Admin login for {username}")
            return True
        log_warning(logger, f"Rejected admin login for {username}")
        return False

    async def logout(self, request: Request) -> bool:
        request.session.pop("admin_token", None)
        return True

    async def authenticate(self, request: Request) -> bool:
        return bool(request.session.get("admin_token"))


authentication_backend = AdminAuth(secret_key=settings.SECRET_KEY)


class UserAdmin(ModelView, model=User):
    column_list = [User.id, User.name, User.email, User.role, User.company, User.created_at]
    column_searchable_list = [User.email, User.name]
    form_excluded_columns = [User.password_hash, User.memberships]
    can_create = False
    icon = "fa-solid fa-user"


class TeamAdmin(ModelView, model=Team):
    column_list = [Team.id, Team.name, Team.slug, Team.owner_id, Team.created_at]
    column_searchable_list = [Team.name, Team.slug]
    icon = "fa-solid fa-people-group"


class TeamMemberAdmin(ModelView, model=TeamMember):
    name = "Team Member"
    name_plural = "Team Members"
    column_list = [TeamMember.id, TeamMember.team_id, TeamMember.user_id, TeamMember.role]
    form_columns = [TeamMember.team, TeamMember.user, TeamMember.role]
    icon = "fa-solid fa-id-badge"


class ClientAdmin(ModelView, model=Client):
    column_list = [Client.id, Client.name, Client.team_id, Client.industry, Client.created_at]
    column_searchable_list = [Client.name]
    icon = "fa-solid fa-briefcase"


class IntegrationAdmin(ModelView, model=Integration):
    column_list = [
        Integration.id,
        Integration.client_id,
        Integration.provider,
        Integration.status,
        Integration.last_synced_at,
    ]
    form_columns = [
        Integration.client,
        Integration.provider,
        Integration.status,
        Integration.account_id,
        Integration.settings,
    ]
    icon = "fa-solid fa-plug"


class TemplateAdmin(ModelView, model=Template):
    name = "Report Template"
    name_plural = "Report Templates"
    column_list = [Template.id, Template.name, Template.category, Template.is_default, Template.usage_count]
    icon = "fa-solid fa-table-columns"


class ReportAdmin(ModelView, model=Report):
    can_create = False
    column_list = [Report.id, Report.name, Report.client_id, Report.status, Report.date_from, Report.date_to]
    column_searchable_list = [Report.name]
    icon = "fa-solid fa-file-pdf"


ADMIN_VIEWS = [
    UserAdmin,
    TeamAdmin,
    TeamMemberAdmin,
    ClientAdmin,
    IntegrationAdmin,
    TemplateAdmin,
    ReportAdmin,
]


def setup_admin(app, engine) -> Admin:
    admin = Admin(
        app,
        engine,
        authentication_backend=authentication_backend,
        title=f"{settings.PROJECT_NAME} Admin",
    )
    for view in ADMIN_VIEWS:
        admin.add_view(view)
    return admin
