"""Translation lookups (cache -> store -> fallback) and the single write path."""
import hashlib
import json
import logging

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

CACHE_PREFIX = 'translation:'
CACHE_TTL = 86400  # 24 hours


class TranslationError(Exception):
    """Base class for translation subsystem errors."""


class ResolutionError(TranslationError):
    """The store could not be read; callers should show their fallback."""


def _id_part(content_id) -> str:
    return '*' if content_id is None else str(content_id)


def cache_key(content_type: str, content_id, field_name: str, lang_code: str) -> str:
    """Deterministic TextCache key for a single lookup."""
    raw = f"{content_type}|{_id_part(content_id)}|{field_name}|{lang_code}"
    return CACHE_PREFIX + hashlib.sha256(raw.encode('utf-8')).hexdigest()[:32]


def batch_cache_key(content_type: str, content_id, lang_code: str) -> str:
    """TextCache key for all fields of one content object in one language."""
    return f"{CACHE_PREFIX}batch:{content_type}:{_id_part(content_id)}:{lang_code}"


class TranslationResolver:
    """Serves single and batch lookups and owns the only write path.

    Never calls a translation provider; reads are cache and store only.
    """

    def __init__(self, store, cache, ttl: int = CACHE_TTL):
        self.store = store
        self.cache = cache
        self.ttl = ttl

    def get_one(self, content_type, content_id, field_name, lang_code, fallback=None):
        """Return the stored translation, or ``fallback`` unchanged if none exists."""
        key = cache_key(content_type, content_id, field_name, lang_code)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            record = self.store.find(content_type, content_id, field_name, lang_code)
        except SQLAlchemyError as e:
            self.store.session.rollback()
            raise ResolutionError(f"Translation lookup failed: {e}") from e

        if record is None or not record.translated_text:
            # Fallback is caller-supplied and may vary, so it is never cached
            return fallback

        self.cache.set(key, record.translated_text, self.ttl)
        return record.translated_text

    def get_batch(self, content_type, content_id, lang_code) -> dict:
        """Return ``{field_name: {'text': ..., 'manual': ...}}``; empty when nothing exists."""
        key = batch_cache_key(content_type, content_id, lang_code)
        cached = self.cache.get(key)
        if cached is not None:
            try:
                return json.loads(cached)
            except ValueError:
                logger.warning(f"Discarding corrupt batch cache entry {key}")
                self.cache.delete(key)

        try:
            records = self.store.find_batch(content_type, content_id, lang_code)
        except SQLAlchemyError as e:
            self.store.session.rollback()
            raise ResolutionError(f"Batch translation lookup failed: {e}") from e

        translations = {
            r.field_name: {'text': r.translated_text, 'manual': bool(r.manual_override)}
            for r in records
        }
        if translations:
            self.cache.set(key, json.dumps(translations), self.ttl)
        return translations

    def save(self, content_type, content_id, field_name, lang_code,
             original_text, translated_text, manual_override=False) -> bool:
        """Upsert one record, then invalidate its single and batch cache entries.

        Returns True when the record was written. False means the store failed,
        or an automatic write met an existing manual override and was skipped.

        Invalidation runs after the commit. A reader that caches the old value
        between the two steps is bounded by the cache TTL.
        """
        try:
            written = self.store.upsert(content_type, content_id, field_name, lang_code,
                                        original_text, translated_text, manual_override)
        except SQLAlchemyError as e:
            self.store.session.rollback()
            logger.error(
                f"Failed to save translation {content_type}:{content_id}:{field_name} "
                f"[{lang_code}]: {e}"
            )
            return False

        if not written:
            logger.info(
                f"Kept manual override for {content_type}:{content_id}:{field_name} [{lang_code}]"
            )
            return False

        self.invalidate(content_type, content_id, field_name, lang_code)
        return True

    def invalidate(self, content_type, content_id, field_name, lang_code):
        self.cache.delete(cache_key(content_type, content_id, field_name, lang_code))
        self.cache.delete(batch_cache_key(content_type, content_id, lang_code))
