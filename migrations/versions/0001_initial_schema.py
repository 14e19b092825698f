"""Initial schema: users, companies, experiences and their nested rows

Revision ID: 5d1e7a9c3b20
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates: users, companies, interview_experiences, interview_rounds,
coding_questions, platform_links, interview_votes, interview_comments,
interview_views, website_analytics.

Constraints worth knowing about:
  - uq_interview_votes_experience_id_user_id: one vote per (experience, user)
  - uq_interview_rounds_experience_id_round_number: round numbers unique per experience
  - ix_interview_views_experience_ip_created backs the 24h view dedup lookup
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5d1e7a9c3b20"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("now()"),
    )


def upgrade() -> None:
    # --- users table ---
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("api_key_hash", sa.String(255), nullable=True, unique=True),
        sa.Column("full_name", sa.String(150), nullable=False),
        sa.Column("year_of_passing", sa.Integer(), nullable=True),
        sa.Column("branch", sa.String(100), nullable=True),
        _created_at(),
        _updated_at(),
    )

    # --- companies table ---
    op.create_table(
        "companies",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False, unique=True),
        sa.Column("logo_url", sa.String(500), nullable=True),
        sa.Column("website", sa.String(500), nullable=True),
        sa.Column("industry", sa.String(100), nullable=True),
        _created_at(),
    )
    op.create_index("ix_companies_name", "companies", ["name"])

    # --- interview_experiences table ---
    op.create_table(
        "interview_experiences",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", name="fk_interview_experiences_user_id_users"),
            nullable=False,
        ),
        sa.Column(
            "company_id",
            sa.Uuid(),
            sa.ForeignKey("companies.id", name="fk_interview_experiences_company_id_companies"),
            nullable=False,
        ),
        sa.Column("position", sa.String(200), nullable=False),
        sa.Column("experience_level", sa.String(50), nullable=False, server_default="fresher"),
        sa.Column("experience_years", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("interview_date", sa.Date(), nullable=False),
        sa.Column("result", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("overall_rating", sa.SmallInteger(), nullable=False),
        sa.Column("difficulty_level", sa.SmallInteger(), nullable=False),
        sa.Column("interview_process", sa.Text(), nullable=False),
        sa.Column("preparation_time", sa.String(100), nullable=True),
        sa.Column("advice", sa.Text(), nullable=False),
        sa.Column("salary_offered", sa.String(100), nullable=True),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False, server_default="false"),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint(
            "overall_rating BETWEEN 1 AND 5", name="ck_interview_experiences_overall_rating"
        ),
        sa.CheckConstraint(
            "difficulty_level BETWEEN 1 AND 5", name="ck_interview_experiences_difficulty_level"
        ),
    )
    op.create_index("ix_interview_experiences_user_id", "interview_experiences", ["user_id"])
    op.create_index("ix_interview_experiences_company_id", "interview_experiences", ["company_id"])
    op.create_index("ix_interview_experiences_result", "interview_experiences", ["result"])
    op.create_index("ix_interview_experiences_created_at", "interview_experiences", ["created_at"])

    # --- interview_rounds table ---
    op.create_table(
        "interview_rounds",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "experience_id",
            sa.Uuid(),
            sa.ForeignKey(
                "interview_experiences.id",
                name="fk_interview_rounds_experience_id_interview_experiences",
                ondelete="CASCADE",
            ),
            nullable=False,
        ),
        sa.Column("round_number", sa.Integer(), nullable=False),
        sa.Column("round_type", sa.String(30), nullable=False),
        sa.Column("round_name", sa.String(200), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("difficulty", sa.SmallInteger(), nullable=True),
        sa.Column("result", sa.String(20), nullable=False, server_default="pending"),
        _created_at(),
        sa.UniqueConstraint(
            "experience_id", "round_number", name="uq_interview_rounds_experience_id_round_number"
        ),
    )

    # --- coding_questions table ---
    op.create_table(
        "coding_questions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "round_id",
            sa.Uuid(),
            sa.ForeignKey(
                "interview_rounds.id",
                name="fk_coding_questions_round_id_interview_rounds",
                ondelete="CASCADE",
            ),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("difficulty", sa.String(10), nullable=False, server_default="medium"),
        sa.Column("topics", sa.JSON(), nullable=False),
        sa.Column("solution_approach", sa.Text(), nullable=True),
        sa.Column("time_complexity", sa.String(100), nullable=True),
        sa.Column("space_complexity", sa.String(100), nullable=True),
        _created_at(),
    )
    op.create_index("ix_coding_questions_round_id", "coding_questions", ["round_id"])
    op.create_index("ix_coding_questions_difficulty", "coding_questions", ["difficulty"])

    # --- platform_links table ---
    op.create_table(
        "platform_links",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "question_id",
            sa.Uuid(),
            sa.ForeignKey(
                "coding_questions.id",
                name="fk_platform_links_question_id_coding_questions",
                ondelete="CASCADE",
            ),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("platform", sa.String(20), nullable=False),
        sa.Column("url", sa.String(2000), nullable=False),
        sa.Column("problem_id", sa.String(100), nullable=True),
        _created_at(),
    )
    op.create_index("ix_platform_links_question_id", "platform_links", ["question_id"])

    # --- interview_votes table ---
    op.create_table(
        "interview_votes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "experience_id",
            sa.Uuid(),
            sa.ForeignKey(
                "interview_experiences.id",
                name="fk_interview_votes_experience_id_interview_experiences",
                ondelete="CASCADE",
            ),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", name="fk_interview_votes_user_id_users"),
            nullable=False,
        ),
        sa.Column("vote_type", sa.String(10), nullable=False),
        _created_at(),
        sa.UniqueConstraint(
            "experience_id", "user_id", name="uq_interview_votes_experience_id_user_id"
        ),
    )

    # --- interview_comments table ---
    op.create_table(
        "interview_comments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "experience_id",
            sa.Uuid(),
            sa.ForeignKey(
                "interview_experiences.id",
                name="fk_interview_comments_experience_id_interview_experiences",
                ondelete="CASCADE",
            ),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", name="fk_interview_comments_user_id_users"),
            nullable=False,
        ),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
    )
    op.create_index(
        "ix_interview_comments_experience_id", "interview_comments", ["experience_id"]
    )

    # --- interview_views table ---
    op.create_table(
        "interview_views",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "experience_id",
            sa.Uuid(),
            sa.ForeignKey(
                "interview_experiences.id",
                name="fk_interview_views_experience_id_interview_experiences",
                ondelete="CASCADE",
            ),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", name="fk_interview_views_user_id_users"),
            nullable=True,
        ),
        sa.Column("ip_address", sa.String(64), nullable=False),
        _created_at(),
    )
    op.create_index(
        "ix_interview_views_experience_ip_created",
        "interview_views",
        ["experience_id", "ip_address", "created_at"],
    )

    # --- website_analytics table ---
    op.create_table(
        "website_analytics",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", name="fk_website_analytics_user_id_users"),
            nullable=True,
        ),
        sa.Column("ip_address", sa.String(64), nullable=False),
        sa.Column("user_agent", sa.Text(), nullable=False, server_default=""),
        sa.Column("page_url", sa.Text(), nullable=False),
        sa.Column("referrer", sa.Text(), nullable=False, server_default=""),
        sa.Column("session_id", sa.String(200), nullable=False, server_default=""),
        _created_at(),
    )
    op.create_index("ix_website_analytics_created_at", "website_analytics", ["created_at"])


def downgrade() -> None:
    # Drop tables in reverse dependency order
    op.drop_index("ix_website_analytics_created_at", table_name="website_analytics")
    op.drop_table("website_analytics")
    op.drop_index("ix_interview_views_experience_ip_created", table_name="interview_views")
    op.drop_table("interview_views")
    op.drop_index("ix_interview_comments_experience_id", table_name="interview_comments")
    op.drop_table("interview_comments")
    op.drop_table("interview_votes")
    op.drop_index("ix_platform_links_question_id", table_name="platform_links")
    op.drop_table("platform_links")
    op.drop_index("ix_coding_questions_difficulty", table_name="coding_questions")
    op.drop_index("ix_coding_questions_round_id", table_name="coding_questions")
    op.drop_table("coding_questions")
    op.drop_table("interview_rounds")
    op.drop_index("ix_interview_experiences_created_at", table_name="interview_experiences")
    op.drop_index("ix_interview_experiences_result", table_name="interview_experiences")
    op.drop_index("ix_interview_experiences_company_id", table_name="interview_experiences")
    op.drop_index("ix_interview_experiences_user_id", table_name="interview_experiences")
    op.drop_table("interview_experiences")
    op.drop_index("ix_companies_name", table_name="companies")
    op.drop_table("companies")
    op.drop_table("users")
