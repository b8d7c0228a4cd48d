"""001 – Initial schema: employees, teams, users, absence requests, feedback.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00
"""

from alembic import op

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

# Enum labels are the Python member names (SQLAlchemy's default for sa.Enum).
ENUM_TYPES: list[tuple[str, list[str]]] = [
    ("user_role", ["employee", "manager", "hr", "admin"]),
    ("absence_type", ["vacation", "sick_leave", "personal", "unpaid"]),
    ("absence_status", ["pending", "approved", "rejected"]),
]


def _create_enum(name: str, values: list[str]) -> None:
    vals = ", ".join(f"'{v}'" for v in values)
    op.execute(f"CREATE TYPE {name} AS ENUM ({vals})")


def _drop_enum(name: str) -> None:
    op.execute(f"DROP TYPE IF EXISTS {name}")


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    # ── Extensions ────────────────────────────────────────────────────────
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ── Enum types ────────────────────────────────────────────────────────
    for name, values in ENUM_TYPES:
        _create_enum(name, values)

    # ── 1. employees ──────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE employees (
            id          UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            first_name  VARCHAR(100) NOT NULL,
            last_name   VARCHAR(100) NOT NULL,
            email       VARCHAR(100) NOT NULL UNIQUE,
            position    VARCHAR(100),
            department  VARCHAR(100),
            hire_date   DATE,
            salary      NUMERIC(12, 2),
            manager_id  UUID REFERENCES employees(id) ON DELETE SET NULL,
            created_at  TIMESTAMPTZ DEFAULT NOW(),
            updated_at  TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX ix_employees_manager_id ON employees (manager_id)")

    # ── 2. teams + membership ─────────────────────────────────────────────
    op.execute("""
        CREATE TABLE teams (
            id          UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            name        VARCHAR(100) NOT NULL,
            manager_id  UUID REFERENCES employees(id) ON DELETE SET NULL,
            created_at  TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE TABLE team_members (
            team_id     UUID NOT NULL REFERENCES teams(id) ON DELETE CASCADE,
            employee_id UUID NOT NULL REFERENCES employees(id) ON DELETE CASCADE,
            PRIMARY KEY (team_id, employee_id)
        )
    """)

    # ── 3. users ──────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE users (
            id            UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            username      VARCHAR(100) NOT NULL UNIQUE,
            password_hash VARCHAR(255) NOT NULL,
            role          user_role NOT NULL,
            employee_id   UUID UNIQUE REFERENCES employees(id) ON DELETE CASCADE,
            created_at    TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    # ── 4. absence_requests ───────────────────────────────────────────────
    op.execute("""
        CREATE TABLE absence_requests (
            id              UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_id     UUID NOT NULL REFERENCES employees(id) ON DELETE CASCADE,
            start_date      DATE NOT NULL,
            end_date        DATE NOT NULL,
            type            absence_type NOT NULL,
            reason          VARCHAR(500),
            status          absence_status NOT NULL DEFAULT 'pending',
            approved_by_id  UUID REFERENCES employees(id) ON DELETE SET NULL,
            requested_at    TIMESTAMPTZ NOT NULL,
            responded_at    TIMESTAMPTZ,
            manager_comment TEXT,
            CONSTRAINT ck_absence_date_range CHECK (end_date >= start_date)
        )
    """)
    op.execute(
        "CREATE INDEX ix_absence_requests_employee_id ON absence_requests (employee_id)"
    )

    # ── 5. feedback ───────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE feedback (
            id               UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            from_employee_id UUID NOT NULL REFERENCES employees(id) ON DELETE CASCADE,
            to_employee_id   UUID NOT NULL REFERENCES employees(id) ON DELETE CASCADE,
            feedback_text    VARCHAR(1000) NOT NULL,
            timestamp        TIMESTAMPTZ NOT NULL,
            CONSTRAINT ck_feedback_not_self CHECK (from_employee_id <> to_employee_id)
        )
    """)
    op.execute("CREATE INDEX ix_feedback_from_employee_id ON feedback (from_employee_id)")
    op.execute("CREATE INDEX ix_feedback_to_employee_id ON feedback (to_employee_id)")


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    # Drop tables in reverse dependency order
    tables = [
        "feedback",
        "absence_requests",
        "users",
        "team_members",
        "teams",
        "employees",
    ]
    for table in tables:
        op.execute(f"DROP TABLE IF EXISTS {table} CASCADE")

    for name, _ in reversed(ENUM_TYPES):
        _drop_enum(name)
