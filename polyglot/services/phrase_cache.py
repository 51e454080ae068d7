"""Content-addressed cache of machine-translated phrases.

Identical source text reused across many content rows is translated once per
language pair. Entries expire after 30 days and are then re-translated.
"""
import hashlib
import logging
from datetime import datetime, timedelta

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from polyglot.models import TranslationCache
from polyglot.utils.db import upsert

logger = logging.getLogger(__name__)

RETENTION = timedelta(days=30)
SOURCE_TEXT_LIMIT = 1000  # stored prefix of the original text


def get_text_hash(text: str) -> str:
    """Generate a hash for the text to use as cache key."""
    return hashlib.sha256(text.encode('utf-8')).hexdigest()


class PhraseCache:
    """Database-backed phrase cache. Lookup and store failures are logged and ignored."""

    def __init__(self, session, retention: timedelta = RETENTION):
        self.session = session
        self.retention = retention

    def _live_entry(self, text_hash: str, source_lang: str, target_lang: str):
        now = datetime.utcnow()
        return self.session.query(TranslationCache).filter(
            TranslationCache.source_text_hash == text_hash,
            TranslationCache.source_lang == source_lang,
            TranslationCache.target_lang == target_lang,
            or_(TranslationCache.expires_at.is_(None), TranslationCache.expires_at > now),
        ).first()

    def get(self, text: str, source_lang: str, target_lang: str) -> str | None:
        """Return a live cached translation and count the hit, or None."""
        try:
            entry = self._live_entry(get_text_hash(text), source_lang, target_lang)
            if entry is None:
                return None
            # Increment in SQL so concurrent hits are not lost
            self.session.query(TranslationCache).filter_by(id=entry.id).update(
                {TranslationCache.cache_hits: TranslationCache.cache_hits + 1},
                synchronize_session=False,
            )
            translated = entry.translated_text
            self.session.commit()
            logger.debug(f"Phrase cache hit: '{text[:30]}' ({source_lang}->{target_lang})")
            return translated
        except SQLAlchemyError as e:
            logger.warning(f"Phrase cache lookup error: {e}")
            self.session.rollback()
            return None

    def put(self, text: str, source_lang: str, target_lang: str, translated_text: str) -> bool:
        """Store (or refresh an expired) translation for ``text``."""
        now = datetime.utcnow()
        values = {
            'source_text_hash': get_text_hash(text),
            'source_lang': source_lang,
            'target_lang': target_lang,
            'source_text': text[:SOURCE_TEXT_LIMIT],
            'translated_text': translated_text,
            'cache_hits': 0,
            'expires_at': now + self.retention,
            'created_at': now,
        }
        try:
            upsert(
                self.session, TranslationCache, values,
                conflict_columns=['source_text_hash', 'source_lang', 'target_lang'],
                update_columns=['translated_text', 'expires_at'],
            )
            self.session.commit()
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Phrase cache storage error: {e}")
            self.session.rollback()
            return False

    def get_entry(self, text: str, source_lang: str, target_lang: str):
        """Raw entry regardless of expiry (admin/diagnostics)."""
        return self.session.query(TranslationCache).filter_by(
            source_text_hash=get_text_hash(text),
            source_lang=source_lang,
            target_lang=target_lang,
        ).first()
