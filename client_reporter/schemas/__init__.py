from client_reporter.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    SessionRead,
    SessionUser,
)
from client_reporter.schemas.clients import (
    ClientCounts,
    ClientCreate,
    ClientListItem,
    ClientRead,
    ClientUpdate,
)
from client_reporter.schemas.integrations import (
    IntegrationConnect,
    IntegrationRead,
    ProviderSummary,
)
from client_reporter.schemas.reports import (
    ReportCreate,
    ReportListItem,
    ReportRead,
    ReportStatusUpdate,
)
from client_reporter.schemas.teams import (
    MemberAdd,
    MemberRead,
    ProfileUpdate,
    TeamRead,
    TeamUpdate,
)
from client_reporter.schemas.templates import TemplateCreate, TemplateRead
