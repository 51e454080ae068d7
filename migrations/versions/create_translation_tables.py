"""Create translations, translation_cache and supported_languages tables

Revision ID: create_translation_tables
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'create_translation_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # One row per (content_type, content_id, field_name, lang_code).
    # content_id -1 stands for language-independent singleton strings.
    op.create_table(
        'translations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('content_type', sa.String(50), nullable=False),
        sa.Column('content_id', sa.Integer(), nullable=False, server_default='-1'),
        sa.Column('field_name', sa.String(100), nullable=False),
        sa.Column('lang_code', sa.String(10), nullable=False),
        sa.Column('original_text', sa.Text(), nullable=True),
        sa.Column('translated_text', sa.Text(), nullable=False),
        sa.Column('manual_override', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('translation_method', sa.String(10), nullable=False, server_default='auto'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_updated', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('content_type', 'content_id', 'field_name', 'lang_code',
                            name='unique_translation_identity'),
    )
    op.create_index('ix_translations_lang_code', 'translations', ['lang_code'])
    op.create_index('ix_translations_content', 'translations',
                    ['content_type', 'content_id', 'lang_code'])

    op.create_table(
        'translation_cache',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('source_text_hash', sa.String(64), nullable=False),
        sa.Column('source_lang', sa.String(10), nullable=False),
        sa.Column('target_lang', sa.String(10), nullable=False),
        sa.Column('source_text', sa.Text(), nullable=False),
        sa.Column('translated_text', sa.Text(), nullable=False),
        sa.Column('cache_hits', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('source_text_hash', 'source_lang', 'target_lang',
                            name='unique_phrase_translation'),
    )
    op.create_index('ix_translation_cache_source_text_hash', 'translation_cache',
                    ['source_text_hash'])

    op.create_table(
        'supported_languages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('lang_code', sa.String(10), nullable=False),
        sa.Column('lang_name', sa.String(100), nullable=False),
        sa.Column('native_name', sa.String(100), nullable=False),
        sa.Column('flag_icon', sa.String(20), nullable=True),
        sa.Column('rtl', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_supported_languages_lang_code', 'supported_languages',
                    ['lang_code'], unique=True)


def downgrade():
    op.drop_index('ix_supported_languages_lang_code', table_name='supported_languages')
    op.drop_table('supported_languages')
    op.drop_index('ix_translation_cache_source_text_hash', table_name='translation_cache')
    op.drop_table('translation_cache')
    op.drop_index('ix_translations_content', table_name='translations')
    op.drop_index('ix_translations_lang_code', table_name='translations')
    op.drop_table('translations')
