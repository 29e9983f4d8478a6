"""dictionary schema v1 (users/words/meanings/examples/notes/password_reset_tokens)

Revision ID: 0001_dictionary_schema
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_dictionary_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.Text(), nullable=False, unique=True),
        sa.Column("email", sa.Text(), nullable=True, unique=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", sa.Text(), nullable=False, server_default="lexicographer"),
        sa.Column("current_session_id", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
    )

    op.create_table(
        "password_reset_tokens",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token", sa.Text(), nullable=False, unique=True),
        sa.Column("created_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_password_reset_tokens_user_id", "password_reset_tokens", ["user_id"], unique=False)

    op.create_table(
        "words",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("lemma", sa.Text(), nullable=False),
        sa.Column("root", sa.Text(), nullable=True),
        sa.Column("letter", sa.Text(), nullable=False),
        sa.Column("variant", sa.Text(), nullable=True),
        sa.Column("status", sa.Text(), nullable=False, server_default="draft"),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("assigned_to", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_words_lemma", "words", ["lemma"], unique=True)
    op.create_index("ix_words_letter", "words", ["letter"], unique=False)
    op.create_index("ix_words_status", "words", ["status"], unique=False)
    op.create_index("ix_words_assigned_to", "words", ["assigned_to"], unique=False)

    op.create_table(
        "meanings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("word_id", sa.Integer(), sa.ForeignKey("words.id", ondelete="CASCADE"), nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("origin", sa.Text(), nullable=True),
        sa.Column("meaning", sa.Text(), nullable=False),
        sa.Column("observation", sa.Text(), nullable=True),
        sa.Column("remission", sa.Text(), nullable=True),
        sa.Column("grammar_category", sa.Text(), nullable=True),
        sa.Column("social_valuations", sa.Text(), nullable=True),
        sa.Column("social_stratum_markers", sa.Text(), nullable=True),
        sa.Column("style_markers", sa.Text(), nullable=True),
        sa.Column("intentionality_markers", sa.Text(), nullable=True),
        sa.Column("geographical_markers", sa.Text(), nullable=True),
        sa.Column("chronological_markers", sa.Text(), nullable=True),
        sa.Column("frequency_markers", sa.Text(), nullable=True),
        sa.Column("dictionary", sa.Text(), nullable=True),
        sa.Column("variant", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_meanings_word_id", "meanings", ["word_id"], unique=False)

    op.create_table(
        "examples",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("meaning_id", sa.Integer(), sa.ForeignKey("meanings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("author", sa.Text(), nullable=True),
        sa.Column("year", sa.Text(), nullable=True),
        sa.Column("publication", sa.Text(), nullable=True),
        sa.Column("format", sa.Text(), nullable=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("date", sa.Text(), nullable=True),
        sa.Column("city", sa.Text(), nullable=True),
        sa.Column("editorial", sa.Text(), nullable=True),
        sa.Column("volume", sa.Text(), nullable=True),
        sa.Column("number", sa.Text(), nullable=True),
        sa.Column("page", sa.Text(), nullable=True),
        sa.Column("doi", sa.Text(), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_examples_meaning_id", "examples", ["meaning_id"], unique=False)

    op.create_table(
        "notes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("word_id", sa.Integer(), sa.ForeignKey("words.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("note", sa.Text(), nullable=False),
        sa.Column("resolved", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_notes_word_id", "notes", ["word_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_notes_word_id", table_name="notes")
    op.drop_table("notes")
    op.drop_index("ix_examples_meaning_id", table_name="examples")
    op.drop_table("examples")
    op.drop_index("ix_meanings_word_id", table_name="meanings")
    op.drop_table("meanings")
    op.drop_index("ix_words_assigned_to", table_name="words")
    op.drop_index("ix_words_status", table_name="words")
    op.drop_index("ix_words_letter", table_name="words")
    op.drop_index("ix_words_lemma", table_name="words")
    op.drop_table("words")
    op.drop_index("ix_password_reset_tokens_user_id", table_name="password_reset_tokens")
    op.drop_table("password_reset_tokens")
    op.drop_table("users")
