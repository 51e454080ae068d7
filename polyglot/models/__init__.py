"""Database models for the translation backend."""

from .translation import Translation, TranslationMethod, SINGLETON_CONTENT_ID
from .translation_cache import TranslationCache
from .language import SupportedLanguage

__all__ = [
    'Translation',
    'TranslationMethod',
    'SINGLETON_CONTENT_ID',
    'TranslationCache',
    'SupportedLanguage',
]
