"""Supported language registry with a cached, ordered listing."""
import json
import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from polyglot.models import SupportedLanguage
from polyglot.services.resolver import CACHE_PREFIX, CACHE_TTL, ResolutionError

logger = logging.getLogger(__name__)


def languages_cache_key(active_only: bool) -> str:
    return f"{CACHE_PREFIX}languages:{'active' if active_only else 'all'}"


class LanguageRegistry:
    def __init__(self, session, cache, ttl: int = CACHE_TTL):
        self.session = session
        self.cache = cache
        self.ttl = ttl

    def get_supported_languages(self, active_only: bool = True) -> list:
        """Languages ordered by ``sort_order`` ascending, cached per flag."""
        key = languages_cache_key(active_only)
        cached = self.cache.get(key)
        if cached is not None:
            try:
                return json.loads(cached)
            except ValueError:
                self.cache.delete(key)

        try:
            query = self.session.query(SupportedLanguage)
            if active_only:
                query = query.filter(SupportedLanguage.active.is_(True))
            languages = query.order_by(
                SupportedLanguage.sort_order.asc(), SupportedLanguage.lang_code.asc()
            ).all()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise ResolutionError(f"Language lookup failed: {e}") from e

        result = [lang.to_dict() for lang in languages]
        self.cache.set(key, json.dumps(result), self.ttl)
        return result

    def update_language_status(self, lang_code: str, active: bool) -> bool:
        """Set the ``active`` flag, creating the language row if it is missing."""
        try:
            language = self.session.query(SupportedLanguage).filter_by(lang_code=lang_code).first()
            if language is None:
                language = SupportedLanguage(
                    lang_code=lang_code,
                    lang_name=lang_code,
                    native_name=lang_code,
                    sort_order=self._next_sort_order(),
                )
                self.session.add(language)
            language.active = bool(active)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to update language {lang_code}: {e}")
            return False

        self.invalidate()
        return True

    def register_language(self, lang_code: str, lang_name: str, native_name: str,
                          flag_icon: str = None, rtl: bool = False, active: bool = True,
                          sort_order: int = None) -> bool:
        """Insert or update a full language definition."""
        try:
            language = self.session.query(SupportedLanguage).filter_by(lang_code=lang_code).first()
            if language is None:
                if sort_order is None:
                    sort_order = self._next_sort_order()
                language = SupportedLanguage(lang_code=lang_code)
                self.session.add(language)
            language.lang_name = lang_name
            language.native_name = native_name
            language.flag_icon = flag_icon
            language.rtl = rtl
            language.active = active
            if sort_order is not None:
                language.sort_order = sort_order
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to register language {lang_code}: {e}")
            return False

        self.invalidate()
        return True

    def invalidate(self):
        # Only the two listing variants; other cache entries stay warm
        self.cache.delete(languages_cache_key(True))
        self.cache.delete(languages_cache_key(False))

    def _next_sort_order(self) -> int:
        current = self.session.query(func.max(SupportedLanguage.sort_order)).scalar()
        return (current or 0) + 1
