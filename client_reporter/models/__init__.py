from client_reporter.models.base import Base
from client_reporter.models.user import User
from client_reporter.models.team import Team, TeamMember, TeamRole
from client_reporter.models.client import Client
from client_reporter.models.integration import Integration, IntegrationStatus
from client_reporter.models.template import Template, TemplateCategory
from client_reporter.models.report import Report, ReportStatus

__all__ = [
    "Base",
    "User",
    "Team",
    "TeamMember",
    "TeamRole",
    "Client",
    "Integration",
    "IntegrationStatus",
    "Template",
    "TemplateCategory",
    "Report",
    "ReportStatus",
]
