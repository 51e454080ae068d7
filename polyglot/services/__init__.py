"""Translation subsystem wiring.

``TranslationManager`` bundles the resolver, auto-translator, backfill engine
and language registry around one store session and one cache backend. The
app factory builds a single instance and keeps it in ``app.extensions``;
tests can build their own with an in-memory cache and a fake provider.
"""
from flask import current_app

from polyglot.services.auto_translate import AutoTranslator
from polyglot.services.backfill import BackfillEngine, BackfillInProgress
from polyglot.services.cache import create_cache_backend
from polyglot.services.languages import LanguageRegistry
from polyglot.services.phrase_cache import PhraseCache
from polyglot.services.providers import create_provider
from polyglot.services.resolver import (
    CACHE_TTL, ResolutionError, TranslationError, TranslationResolver,
)
from polyglot.services.store import TranslationStore

EXTENSION_KEY = 'translation_manager'


class TranslationManager:
    def __init__(self, session, cache, provider=None, ttl: int = CACHE_TTL):
        self.session = session
        self.cache = cache
        self.provider = provider
        self.store = TranslationStore(session)
        self.phrase_cache = PhraseCache(session)
        self.resolver = TranslationResolver(self.store, cache, ttl=ttl)
        self.translator = AutoTranslator(self.phrase_cache, provider)
        self.backfill = BackfillEngine(self.store, self.resolver, self.translator)
        self.languages = LanguageRegistry(session, cache, ttl=ttl)

    def get_translation(self, content_type, content_id, field_name, lang_code, fallback=None):
        return self.resolver.get_one(content_type, content_id, field_name, lang_code, fallback)

    def get_translations(self, content_type, content_id, lang_code):
        return self.resolver.get_batch(content_type, content_id, lang_code)

    def save_translation(self, content_type, content_id, field_name, lang_code,
                         original_text, translated_text, manual_override=False):
        return self.resolver.save(content_type, content_id, field_name, lang_code,
                                  original_text, translated_text, manual_override)

    def auto_translate(self, text, source_lang, target_lang):
        return self.translator.translate(text, source_lang, target_lang)

    def bulk_auto_translate(self, content_type, target_lang, limit):
        return self.backfill.run(content_type, target_lang, limit)

    def get_supported_languages(self, active_only=True):
        return self.languages.get_supported_languages(active_only)

    def update_language_status(self, lang_code, active):
        return self.languages.update_language_status(lang_code, active)

    def get_translation_stats(self, lang_code=None):
        return self.store.get_translation_stats(lang_code)

    def get_admin_translations(self, lang_code, content_type=None, manual_only=False,
                               page=1, limit=50):
        return self.store.list_translations(lang_code, content_type, manual_only, page, limit)


def init_translation_manager(app):
    """Build the app-wide manager from config and register it on ``app``."""
    from polyglot import db

    cache = create_cache_backend(
        app.config.get('REDIS_URL', ''),
        enabled=app.config.get('TRANSLATION_CACHE_ENABLED', True),
    )
    provider = create_provider(
        app.config.get('TRANSLATION_SERVICE', 'google'),
        google_api_key=app.config.get('GOOGLE_TRANSLATE_API_KEY', ''),
        deepl_api_key=app.config.get('DEEPL_API_KEY', ''),
        timeout=app.config.get('TRANSLATION_TIMEOUT', 10),
    )
    manager = TranslationManager(
        db.session, cache, provider,
        ttl=app.config.get('TRANSLATION_CACHE_TTL', CACHE_TTL),
    )
    app.extensions[EXTENSION_KEY] = manager
    return manager


def get_translation_manager() -> TranslationManager:
    """Manager of the current app."""
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    'TranslationManager',
    'init_translation_manager',
    'get_translation_manager',
    'TranslationError',
    'ResolutionError',
    'BackfillInProgress',
]
