"""Baseline: users, categories, subscriptions, view logs and articles.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("idx", sa.Integer, primary_key=True),
        sa.Column("uid", sa.String, unique=True, nullable=False),
        sa.Column("push_on", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("created_time", sa.DateTime),
    )

    op.create_table(
        "news_categories",
        sa.Column("idx", sa.Integer, primary_key=True),
        sa.Column("category", sa.String, unique=True, nullable=False),
        sa.Column("fcm_topic", sa.String, server_default=""),
        sa.Column("status", sa.Integer, nullable=False, server_default=sa.text("1")),
    )

    op.create_table(
        "user_category_subscriptions",
        sa.Column("idx", sa.Integer, primary_key=True),
        sa.Column("user_idx", sa.Integer, sa.ForeignKey("users.idx"), nullable=False),
        sa.Column("category_idx", sa.Integer, sa.ForeignKey("news_categories.idx"), nullable=False),
        sa.Column("notification_option", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.UniqueConstraint("user_idx", "category_idx"),
    )

    op.create_table(
        "marketing_consent",
        sa.Column("idx", sa.Integer, primary_key=True),
        sa.Column("user_idx", sa.Integer, sa.ForeignKey("users.idx"), unique=True, nullable=False),
        sa.Column("consent", sa.Integer, nullable=False),
        sa.Column("updated_time", sa.DateTime),
    )

    op.create_table(
        "user_current_plan",
        sa.Column("idx", sa.Integer, primary_key=True),
        sa.Column("user_idx", sa.Integer, sa.ForeignKey("users.idx"), nullable=False),
        sa.Column("plan", sa.Integer, nullable=False),
        sa.Column("status", sa.Integer, nullable=False, server_default=sa.text("1")),
    )

    op.create_table(
        "user_view_logs",
        sa.Column("idx", sa.Integer, primary_key=True),
        sa.Column("user_idx", sa.Integer, sa.ForeignKey("users.idx"), nullable=False),
        sa.Column("article_type", sa.String, nullable=False),
        sa.Column("article_idx", sa.Integer, nullable=False),
        sa.Column("viewed_time", sa.DateTime, nullable=False),
    )
    op.create_index("ix_user_view_logs_user_idx", "user_view_logs", ["user_idx"])
    op.create_index("ix_user_view_logs_viewed_time", "user_view_logs", ["viewed_time"])

    op.create_table(
        "user_saved_articles",
        sa.Column("idx", sa.Integer, primary_key=True),
        sa.Column("user_idx", sa.Integer, sa.ForeignKey("users.idx"), nullable=False),
        sa.Column("article_type", sa.String, nullable=False),
        sa.Column("article_idx", sa.Integer, nullable=False),
        sa.Column("status", sa.Integer, nullable=False, server_default=sa.text("1")),
        sa.Column("updated_time", sa.DateTime),
    )
    op.create_index("ix_user_saved_articles_user_idx", "user_saved_articles", ["user_idx"])

    op.create_table(
        "news",
        sa.Column("idx", sa.Integer, primary_key=True),
        sa.Column("title", sa.String, server_default=""),
        sa.Column("from", sa.String, server_default=""),
        sa.Column("url", sa.String, server_default=""),
        sa.Column("created_time", sa.DateTime, nullable=False),
        sa.Column("status", sa.Integer, nullable=False, server_default=sa.text("1")),
    )

    op.create_table(
        "news_categories_map",
        sa.Column("idx", sa.Integer, primary_key=True),
        sa.Column("category_idx", sa.Integer, sa.ForeignKey("news_categories.idx"), nullable=False),
        sa.Column("news_idx", sa.Integer, sa.ForeignKey("news.idx"), nullable=False),
    )

    for table in ("insights", "media_summaries"):
        op.create_table(
            table,
            sa.Column("idx", sa.Integer, primary_key=True),
            sa.Column("title", sa.String, server_default=""),
            sa.Column("url", sa.String, server_default=""),
            sa.Column("created_time", sa.DateTime),
            sa.Column("status", sa.Integer, nullable=False, server_default=sa.text("1")),
        )


def downgrade() -> None:
    op.drop_table("media_summaries")
    op.drop_table("insights")
    op.drop_table("news_categories_map")
    op.drop_table("news")
    op.drop_index("ix_user_saved_articles_user_idx", table_name="user_saved_articles")
    op.drop_table("user_saved_articles")
    op.drop_index("ix_user_view_logs_viewed_time", table_name="user_view_logs")
    op.drop_index("ix_user_view_logs_user_idx", table_name="user_view_logs")
    op.drop_table("user_view_logs")
    op.drop_table("user_current_plan")
    op.drop_table("marketing_consent")
    op.drop_table("user_category_subscriptions")
    op.drop_table("news_categories")
    op.drop_table("users")
