"""Machine translation with phrase caching and pass-through degradation."""
import logging

from polyglot.services.providers import ProviderError

logger = logging.getLogger(__name__)


class AutoTranslator:
    """Translate text through the phrase cache, then the provider.

    Never raises: missing credentials and provider failures return the
    original text unchanged.
    """

    def __init__(self, phrase_cache, provider=None):
        self.phrase_cache = phrase_cache
        self.provider = provider

    def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """
        Translate ``text`` from ``source_lang`` to ``target_lang``.

        FAST PATHS (no cache or provider touched):
        - Empty text
        - Same source and target language

        Args:
            text: Text to translate
            source_lang: Language code of ``text``
            target_lang: Language code to translate into

        Returns:
            Translated text (or original if translation is unavailable/fails)
        """
        if not text or source_lang == target_lang:
            return text

        cached = self.phrase_cache.get(text, source_lang, target_lang)
        if cached is not None:
            return cached

        if self.provider is None or not self.provider.is_configured():
            logger.warning("Translation provider API key not configured")
            return text

        try:
            translated = self.provider.translate(text, source_lang, target_lang)
        except ProviderError as e:
            logger.warning(f"Translation failed ({source_lang} -> {target_lang}): {e}")
            return text
        except Exception:
            logger.exception(f"Unexpected translation error ({source_lang} -> {target_lang})")
            return text

        if not translated:
            return text

        self.phrase_cache.put(text, source_lang, target_lang, translated)
        return translated
