"""Initial schema: market prices, weather observations, knowledge articles, chat messages

Revision ID: a1c3e5f7b9d1
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "a1c3e5f7b9d1"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "market_prices",
        sa.Column("id", postgresql.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("crop", sa.String(20), nullable=False),
        sa.Column("market", sa.String(20), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("trend", sa.String(10), nullable=False, server_default="stable"),
        sa.Column("change", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("volume", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("unit", sa.String(20), nullable=False, server_default="quintal"),
        sa.Column("observed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("source", sa.String(20), nullable=False, server_default="government"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("price >= 0", name="ck_market_prices_price_non_negative"),
        sa.CheckConstraint("volume >= 0", name="ck_market_prices_volume_non_negative"),
    )
    op.create_index(
        "ix_market_prices_crop_market_observed",
        "market_prices",
        ["crop", "market", "observed_at"],
    )

    op.create_table(
        "weather_observations",
        sa.Column("id", postgresql.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("city", sa.String(20), nullable=False),
        sa.Column("temperature", sa.Float(), nullable=False),
        sa.Column("humidity", sa.Float(), nullable=False),
        sa.Column("rainfall", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("condition", sa.String(100), nullable=False),
        sa.Column("wind_speed", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("pressure", sa.Float(), nullable=False, server_default="1013.0"),
        sa.Column("forecast", postgresql.JSON(), nullable=True),
        sa.Column("observed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("is_simulated", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("updated_by", sa.String(50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("humidity >= 0 AND humidity <= 100", name="ck_weather_observations_humidity_range"),
    )
    op.create_index(
        "ix_weather_observations_city_observed",
        "weather_observations",
        ["city", "observed_at"],
    )

    op.create_table(
        "knowledge_articles",
        sa.Column("id", postgresql.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("tags", postgresql.JSON(), nullable=False, server_default="[]"),
        sa.Column("author", sa.String(100), nullable=False, server_default="Agricultural Expert"),
        sa.Column("views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("rating", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("language", sa.String(20), nullable=False, server_default="english"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("rating >= 0 AND rating <= 5", name="ck_knowledge_articles_rating_range"),
    )
    op.create_index("ix_knowledge_articles_category", "knowledge_articles", ["category"])

    op.create_table(
        "chat_messages",
        sa.Column("id", postgresql.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("session_id", sa.String(100), nullable=False),
        sa.Column("user_id", postgresql.UUID(), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("response", sa.Text(), nullable=True),
        sa.Column("role", sa.String(10), nullable=False),
        sa.Column("category", sa.String(20), nullable=True),
        sa.Column("confidence", sa.Float(), nullable=False, server_default="0.0"),
        sa.Column("metadata", postgresql.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_chat_messages_session_created",
        "chat_messages",
        ["session_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_chat_messages_session_created", table_name="chat_messages")
    op.drop_table("chat_messages")
    op.drop_index("ix_knowledge_articles_category", table_name="knowledge_articles")
    op.drop_table("knowledge_articles")
    op.drop_index("ix_weather_observations_city_observed", table_name="weather_observations")
    op.drop_table("weather_observations")
    op.drop_index("ix_market_prices_crop_market_observed", table_name="market_prices")
    op.drop_table("market_prices")
