"""Moderation core: users, posts, comments, reports, user_sanctions, moderation_actions

Revision ID: 20261019_001
Revises:
Create Date: 2026-10-19

"""

from alembic import op

# revision identifiers, used by Alembic.
revision = "20261019_001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # 1. Accounts
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS users (
            id UUID PRIMARY KEY,
            username VARCHAR(64) NOT NULL UNIQUE,
            email VARCHAR(255) NOT NULL UNIQUE,
            role VARCHAR(16) NOT NULL DEFAULT 'member',
            domain VARCHAR(64),
            xp INTEGER NOT NULL DEFAULT 0,
            level INTEGER NOT NULL DEFAULT 1,
            is_active BOOLEAN NOT NULL DEFAULT true,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT chk_user_role CHECK (role IN ('member','domain_lead','admin')),
            CONSTRAINT chk_user_xp CHECK (xp >= 0),
            CONSTRAINT chk_user_level CHECK (level >= 1)
        )
    """
    )
    op.execute("CREATE INDEX IF NOT EXISTS ix_users_username ON users(username)")

    # 2. Reportable content
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS posts (
            id UUID PRIMARY KEY,
            author_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            channel_id UUID NOT NULL,
            content TEXT NOT NULL,
            is_deleted BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    """
    )
    op.execute("CREATE INDEX IF NOT EXISTS ix_posts_author_id ON posts(author_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_posts_channel_id ON posts(channel_id)")

    op.execute(
        """
        CREATE TABLE IF NOT EXISTS comments (
            id UUID PRIMARY KEY,
            author_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            post_id UUID NOT NULL REFERENCES posts(id) ON DELETE CASCADE,
            content TEXT NOT NULL,
            is_deleted BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    """
    )
    op.execute("CREATE INDEX IF NOT EXISTS ix_comments_author_id ON comments(author_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_comments_post_id ON comments(post_id)")

    # 3. Reports
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS reports (
            id UUID PRIMARY KEY,
            content_type VARCHAR(16) NOT NULL,
            content_id UUID NOT NULL,
            reporter_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            reason VARCHAR(64) NOT NULL,
            status VARCHAR(16) NOT NULL DEFAULT 'pending',
            resolved_by UUID REFERENCES users(id) ON DELETE SET NULL,
            resolved_at TIMESTAMPTZ,
            resolution_notes TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT chk_report_content_type CHECK (content_type IN ('post','comment')),
            CONSTRAINT chk_report_status CHECK (status IN ('pending','dismissed','resolved')),
            CONSTRAINT chk_report_resolution
                CHECK ((status = 'pending') = (resolved_by IS NULL AND resolved_at IS NULL))
        )
    """
    )
    op.execute("CREATE INDEX IF NOT EXISTS ix_reports_content_id ON reports(content_id)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_reports_reporter_id ON reports(reporter_id)")

    # Index for the moderation queue
    op.execute(
        """
        CREATE INDEX IF NOT EXISTS idx_reports_pending
        ON reports(created_at) WHERE status = 'pending'
    """
    )

    # 4. Sanction ledger
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS user_sanctions (
            id UUID PRIMARY KEY,
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            moderator_id UUID NOT NULL REFERENCES users(id),
            type VARCHAR(24) NOT NULL,
            reason TEXT NOT NULL,
            description TEXT,
            expires_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT chk_sanction_type CHECK (type IN ('warning','temporary_ban','permanent_ban')),
            CONSTRAINT chk_sanction_expiry CHECK ((type = 'temporary_ban') = (expires_at IS NOT NULL)),
            CONSTRAINT chk_sanction_no_self CHECK (user_id <> moderator_id)
        )
    """
    )
    op.execute("CREATE INDEX IF NOT EXISTS ix_user_sanctions_user_id ON user_sanctions(user_id)")

    # 5. Audit log
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS moderation_actions (
            id UUID PRIMARY KEY,
            moderator_id UUID NOT NULL REFERENCES users(id),
            content_type VARCHAR(16) NOT NULL,
            content_id UUID NOT NULL,
            action VARCHAR(24) NOT NULL,
            reason TEXT,
            notes JSONB,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    """
    )
    op.execute("CREATE INDEX IF NOT EXISTS ix_moderation_actions_moderator_id ON moderation_actions(moderator_id)")
    op.execute(
        """
        CREATE INDEX IF NOT EXISTS idx_moderation_content
        ON moderation_actions(content_type, content_id)
    """
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS moderation_actions CASCADE")
    op.execute("DROP TABLE IF EXISTS user_sanctions CASCADE")
    op.execute("DROP TABLE IF EXISTS reports CASCADE")
    op.execute("DROP TABLE IF EXISTS comments CASCADE")
    op.execute("DROP TABLE IF EXISTS posts CASCADE")
    op.execute("DROP TABLE IF EXISTS users CASCADE")
