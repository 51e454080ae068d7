"""Bulk machine-translation backfill for content missing a target language."""
import logging
import threading

from polyglot.services.resolver import TranslationError
from polyglot.services.store import SOURCE_LANG

logger = logging.getLogger(__name__)


class BackfillInProgress(TranslationError):
    """Another backfill for the same (content_type, target_lang) is running."""


class BackfillEngine:
    """Translate exactly the gap between source-language records and ``target_lang``.

    Re-running after a partial failure processes only what is still missing,
    since written pairs drop out of the gap query. Manual overrides are never
    selected: they already have a ``target_lang`` record.
    """

    def __init__(self, store, resolver, translator):
        self.store = store
        self.resolver = resolver
        self.translator = translator
        self._registry_lock = threading.Lock()
        self._running = set()

    def _claim(self, pair) -> bool:
        with self._registry_lock:
            if pair in self._running:
                return False
            self._running.add(pair)
            return True

    def _release(self, pair):
        with self._registry_lock:
            self._running.discard(pair)

    def run(self, content_type: str, target_lang: str, limit: int) -> dict:
        """Translate up to ``limit`` missing (content_id, field_name) pairs.

        Returns ``{'processed': N, 'translated': M, 'target_lang': ...}`` where
        ``processed`` counts gap tuples examined and ``translated`` counts
        records written.

        Raises BackfillInProgress if a run for the same pair is active in
        this process; SQLAlchemyError from the gap query propagates.
        """
        report = {'processed': 0, 'translated': 0, 'target_lang': target_lang}
        if limit <= 0:
            return report

        pair = (content_type, target_lang)
        if not self._claim(pair):
            raise BackfillInProgress(
                f"Backfill already running for {content_type} -> {target_lang}"
            )

        try:
            gap = self.store.find_untranslated(content_type, target_lang, limit)
            logger.info(f"Backfill {content_type} -> {target_lang}: {len(gap)} missing fields")

            for content_id, field_name, original_text in gap:
                report['processed'] += 1
                translated = self.translator.translate(original_text, SOURCE_LANG, target_lang)

                if not translated or translated == original_text:
                    continue

                saved = self.resolver.save(
                    content_type, content_id, field_name, target_lang,
                    original_text, translated, manual_override=False,
                )
                if saved:
                    report['translated'] += 1
        finally:
            self._release(pair)

        logger.info(
            f"Backfill {content_type} -> {target_lang} done: "
            f"processed={report['processed']} translated={report['translated']}"
        )
        return report
