"""Durable translation records: lookups, upserts, gap queries and listings.

All queries go through the injected SQLAlchemy session. Content ids are
normalized with ``content_key`` so an absent id is one comparable value.
"""
import logging
import math
from datetime import datetime

from sqlalchemy import and_, case, exists, func
from sqlalchemy.orm import aliased

from polyglot.models import SINGLETON_CONTENT_ID, Translation, TranslationMethod
from polyglot.utils.db import upsert

logger = logging.getLogger(__name__)

SOURCE_LANG = 'en'

IDENTITY_COLUMNS = ['content_type', 'content_id', 'field_name', 'lang_code']


def content_key(content_id) -> int:
    """Map a caller content id (int or None) to its stored value."""
    if content_id is None:
        return SINGLETON_CONTENT_ID
    content_id = int(content_id)
    if content_id < 0:
        raise ValueError(f"content_id must be non-negative, got {content_id}")
    return content_id


def public_content_id(stored_id):
    return None if stored_id == SINGLETON_CONTENT_ID else stored_id


class TranslationStore:
    """Query layer over the ``translations`` table."""

    def __init__(self, session):
        self.session = session

    def find(self, content_type: str, content_id, field_name: str, lang_code: str):
        """Exact match on the identity key, or None."""
        return self.session.query(Translation).filter_by(
            content_type=content_type,
            content_id=content_key(content_id),
            field_name=field_name,
            lang_code=lang_code,
        ).first()

    def find_batch(self, content_type: str, content_id, lang_code: str) -> list:
        """All fields of one content object in one language, single query."""
        return self.session.query(Translation).filter_by(
            content_type=content_type,
            content_id=content_key(content_id),
            lang_code=lang_code,
        ).order_by(Translation.field_name).all()

    def upsert(self, content_type: str, content_id, field_name: str, lang_code: str,
               original_text: str, translated_text: str, manual_override: bool = False) -> bool:
        """Insert or update one record and commit.

        An automatic write (``manual_override`` false) never replaces an
        existing manual override; it returns False in that case. Returns True
        when the record was written.

        Raises SQLAlchemyError on failure; the session is left for the caller
        to roll back.
        """
        now = datetime.utcnow()
        values = {
            'content_type': content_type,
            'content_id': content_key(content_id),
            'field_name': field_name,
            'lang_code': lang_code,
            'original_text': original_text,
            'translated_text': translated_text,
            'manual_override': bool(manual_override),
            'translation_method': TranslationMethod.MANUAL if manual_override else TranslationMethod.AUTO,
            'created_at': now,
            'last_updated': now,
        }
        written = upsert(
            self.session, Translation, values,
            conflict_columns=IDENTITY_COLUMNS,
            update_columns=['original_text', 'translated_text', 'manual_override',
                            'translation_method', 'last_updated'],
            protect_column=None if manual_override else 'manual_override',
        )
        self.session.commit()
        return written

    def find_untranslated(self, content_type: str, target_lang: str, limit: int,
                          source_lang: str = SOURCE_LANG) -> list:
        """Source-language fields of ``content_type`` with no ``target_lang`` record.

        The gap is computed in the database with NOT EXISTS so records added
        concurrently by another run are excluded. Returns a list of
        ``(content_id, field_name, original_text)`` tuples.
        """
        target = aliased(Translation)
        has_target = exists().where(and_(
            target.content_type == Translation.content_type,
            target.content_id == Translation.content_id,
            target.field_name == Translation.field_name,
            target.lang_code == target_lang,
        ))
        rows = self.session.query(
            Translation.content_id,
            Translation.field_name,
            Translation.original_text,
        ).filter(
            Translation.content_type == content_type,
            Translation.lang_code == source_lang,
            ~has_target,
        ).distinct().order_by(
            Translation.content_id, Translation.field_name
        ).limit(limit).all()

        return [(public_content_id(cid), field, text) for cid, field, text in rows]

    def list_translations(self, lang_code: str, content_type: str = None,
                          manual_only: bool = False, page: int = 1, limit: int = 50) -> dict:
        """Paginated admin listing, newest first."""
        page = max(page, 1)
        limit = max(limit, 1)

        query = self.session.query(Translation).filter(Translation.lang_code == lang_code)
        if content_type:
            query = query.filter(Translation.content_type == content_type)
        if manual_only:
            query = query.filter(Translation.manual_override.is_(True))

        total = query.count()
        items = query.order_by(
            Translation.last_updated.desc(), Translation.id.desc()
        ).offset((page - 1) * limit).limit(limit).all()

        return {
            'items': [t.to_dict() for t in items],
            'pagination': {
                'page': page,
                'limit': limit,
                'total': total,
                'total_pages': math.ceil(total / limit),
            },
        }

    def get_translation_stats(self, lang_code: str = None) -> list:
        """Completion overview per (lang_code, content_type)."""
        manual_count = func.sum(case((Translation.manual_override.is_(True), 1), else_=0))
        query = self.session.query(
            Translation.lang_code,
            Translation.content_type,
            func.count(Translation.id),
            manual_count,
        )
        if lang_code:
            query = query.filter(Translation.lang_code == lang_code)
        rows = query.group_by(
            Translation.lang_code, Translation.content_type
        ).order_by(Translation.lang_code, Translation.content_type).all()

        source_totals = dict(
            self.session.query(Translation.content_type, func.count(Translation.id))
            .filter(Translation.lang_code == SOURCE_LANG)
            .group_by(Translation.content_type)
            .all()
        )

        stats = []
        for lang, ctype, total, manual in rows:
            manual = int(manual or 0)
            source_total = source_totals.get(ctype, 0)
            completion = round(min(total / source_total, 1.0) * 100, 1) if source_total else None
            stats.append({
                'lang_code': lang,
                'content_type': ctype,
                'total': total,
                'manual': manual,
                'auto': total - manual,
                'source_total': source_total,
                'completion': completion,
            })
        return stats
