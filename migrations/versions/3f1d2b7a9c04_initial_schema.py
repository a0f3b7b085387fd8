"""initial_schema

Revision ID: 3f1d2b7a9c04
Revises:
Create Date: 2026-10-19 09:12:41.207315

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1d2b7a9c04'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id VARCHAR(36) PRIMARY KEY,
            name VARCHAR(100),
            email VARCHAR(255) NOT NULL UNIQUE,
            password_hash VARCHAR(100),
            image VARCHAR(500),
            role VARCHAR(20) NOT NULL DEFAULT 'USER',
            company VARCHAR(100),
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS teams (
            id VARCHAR(36) PRIMARY KEY,
            name VARCHAR(100) NOT NULL,
            slug VARCHAR(100) NOT NULL UNIQUE,
            owner_id VARCHAR(36) NOT NULL REFERENCES users(id),
            brand_color VARCHAR(20),
            logo_url VARCHAR(500),
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS team_members (
            id VARCHAR(36) PRIMARY KEY,
            team_id VARCHAR(36) NOT NULL REFERENCES teams(id) ON DELETE CASCADE,
            user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            role VARCHAR(20) NOT NULL DEFAULT 'MEMBER',
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_team_member UNIQUE (team_id, user_id)
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS clients (
            id VARCHAR(36) PRIMARY KEY,
            team_id VARCHAR(36) NOT NULL REFERENCES teams(id) ON DELETE CASCADE,
            name VARCHAR(100) NOT NULL,
            email VARCHAR(255),
            website VARCHAR(500),
            industry VARCHAR(100),
            description TEXT,
            logo_url VARCHAR(500),
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS integrations (
            id VARCHAR(36) PRIMARY KEY,
            client_id VARCHAR(36) NOT NULL REFERENCES clients(id) ON DELETE CASCADE,
            provider VARCHAR(50) NOT NULL,
            status VARCHAR(20) NOT NULL DEFAULT 'connected',
            account_id VARCHAR(100),
            settings JSON,
            last_synced_at TIMESTAMP WITH TIME ZONE,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_client_provider UNIQUE (client_id, provider)
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS templates (
            id VARCHAR(36) PRIMARY KEY,
            team_id VARCHAR(36) REFERENCES teams(id) ON DELETE CASCADE,
            name VARCHAR(100) NOT NULL,
            description TEXT,
            category VARCHAR(20) NOT NULL DEFAULT 'CUSTOM',
            is_default BOOLEAN NOT NULL DEFAULT FALSE,
            sections JSON,
            usage_count INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS reports (
            id VARCHAR(36) PRIMARY KEY,
            client_id VARCHAR(36) NOT NULL REFERENCES clients(id) ON DELETE CASCADE,
            template_id VARCHAR(36) REFERENCES templates(id) ON DELETE SET NULL,
            created_by_id VARCHAR(36) REFERENCES users(id) ON DELETE SET NULL,
            name VARCHAR(200) NOT NULL,
            date_from DATE NOT NULL,
            date_to DATE NOT NULL,
            status VARCHAR(20) NOT NULL DEFAULT 'draft',
            pdf_url VARCHAR(500),
            sent_at TIMESTAMP WITH TIME ZONE,
            error_message TEXT,
            created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
        )
    """)

    op.execute("CREATE INDEX IF NOT EXISTS ix_users_email ON users (email)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_teams_slug ON teams (slug)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_team_members_team_id ON team_members (team_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_team_members_user_id ON team_members (user_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_clients_team_id ON clients (team_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_integrations_client_id ON integrations (client_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_integrations_provider ON integrations (provider)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_templates_team_id ON templates (team_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_reports_client_id ON reports (client_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_reports_status ON reports (status)")


def downgrade() -> None:
    """Downgrade schema."""
    for table in ("reports", "templates", "integrations", "clients", "team_members", "teams", "users"):
        op.execute(f"DROP TABLE IF EXISTS {table}")
