"""
Tests for bulk machine-translation backfills.
"""

import pytest

from polyglot.models import Translation
from polyglot.services import TranslationManager
from polyglot.services.backfill import BackfillInProgress
from polyglot.services.cache import MemoryCacheBackend

from conftest import FakeProvider, add_translation


class TestBackfillGap:
    """The gap query and the report counts."""

    def test_translates_every_missing_field(self, manager, english_blog_posts):
        report = manager.bulk_auto_translate('blog', 'es', 100)

        assert report == {'processed': 6, 'translated': 6, 'target_lang': 'es'}
        title = Translation.query.filter_by(
            content_type='blog', content_id=2, field_name='title', lang_code='es'
        ).one()
        assert title.translated_text == f"[es] {english_blog_posts[2]['title']}"
        assert title.original_text == english_blog_posts[2]['title']
        assert title.manual_override is False
        assert title.translation_method == 'auto'

    def test_second_run_is_a_no_op(self, manager, provider, english_blog_posts):
        manager.bulk_auto_translate('blog', 'es', 100)
        calls_after_first = len(provider.calls)

        report = manager.bulk_auto_translate('blog', 'es', 100)

        assert report == {'processed': 0, 'translated': 0, 'target_lang': 'es'}
        assert len(provider.calls) == calls_after_first

    def test_limit_caps_each_run_and_resumes(self, manager, english_blog_posts):
        first = manager.bulk_auto_translate('blog', 'fr', 2)
        second = manager.bulk_auto_translate('blog', 'fr', 100)

        assert first['processed'] == 2
        assert second['processed'] == 4
        assert Translation.query.filter_by(content_type='blog', lang_code='fr').count() == 6

    def test_zero_limit_does_nothing(self, manager, english_blog_posts):
        report = manager.bulk_auto_translate('blog', 'es', 0)

        assert report == {'processed': 0, 'translated': 0, 'target_lang': 'es'}

    def test_other_content_types_are_untouched(self, manager, english_blog_posts):
        add_translation('service', 1, 'name', 'en', 'Web design')

        manager.bulk_auto_translate('blog', 'es', 100)

        assert Translation.query.filter_by(content_type='service', lang_code='es').count() == 0

    def test_target_language_english_has_no_gap(self, manager, english_blog_posts):
        report = manager.bulk_auto_translate('blog', 'en', 100)

        assert report['processed'] == 0

    def test_singleton_strings_are_backfilled(self, manager, db_session):
        manager.save_translation('ui', None, 'cta', 'en', 'Contact us', 'Contact us', False)

        report = manager.bulk_auto_translate('ui', 'de', 10)

        assert report['translated'] == 1
        assert manager.get_translation('ui', None, 'cta', 'de') == '[de] Contact us'


class TestManualOverrides:

    def test_manual_override_is_never_overwritten(self, manager, db_session):
        add_translation('blog', 42, 'title', 'en', 'Hello')
        add_translation('blog', 42, 'body', 'en', 'Some text')
        manager.save_translation('blog', 42, 'title', 'es', 'Hello', 'Hola', True)

        report = manager.bulk_auto_translate('blog', 'es', 100)

        assert report['processed'] == 1
        manual = Translation.query.filter_by(
            content_type='blog', content_id=42, field_name='title', lang_code='es'
        ).one()
        assert manual.translated_text == 'Hola'
        assert manual.manual_override is True

    def test_scenario_manual_save_then_backfill(self, manager, provider, db_session):
        add_translation('blog', 42, 'title', 'en', 'Hello')
        assert manager.save_translation('blog', 42, 'title', 'es', 'Hello', 'Hola', True)
        assert manager.get_translation('blog', 42, 'title', 'es', 'fallback') == 'Hola'

        report = manager.bulk_auto_translate('blog', 'es', 100)

        assert report == {'processed': 0, 'translated': 0, 'target_lang': 'es'}
        assert provider.calls == []
        assert manager.get_translation('blog', 42, 'title', 'es', 'fallback') == 'Hola'

    def test_manual_edit_saved_during_provider_call_survives(self, db_session):
        class EditorRacingProvider(FakeProvider):
            def _call(self, text, source_lang, target_lang):
                # An admin saves the same field while the provider is busy
                manager.save_translation('blog', 42, 'title', 'es', 'Hello', 'Hola (manual)', True)
                return super()._call(text, source_lang, target_lang)

        manager = TranslationManager(db_session, MemoryCacheBackend(), EditorRacingProvider())
        add_translation('blog', 42, 'title', 'en', 'Hello')

        report = manager.bulk_auto_translate('blog', 'es', 100)

        assert report == {'processed': 1, 'translated': 0, 'target_lang': 'es'}
        record = Translation.query.filter_by(
            content_type='blog', content_id=42, field_name='title', lang_code='es'
        ).one()
        assert record.manual_override is True
        assert record.translated_text == 'Hola (manual)'
        assert record.translation_method == 'manual'
        assert manager.get_translation('blog', 42, 'title', 'es', 'fallback') == 'Hola (manual)'

    def test_auto_save_does_not_replace_manual_override(self, manager, db_session):
        manager.save_translation('blog', 7, 'body', 'fr', 'Text', 'Texte (relu)', True)

        assert manager.save_translation('blog', 7, 'body', 'fr', 'Text', '[fr] Text', False) is False

        record = Translation.query.filter_by(content_id=7, lang_code='fr').one()
        assert record.translated_text == 'Texte (relu)'
        assert record.manual_override is True


class TestUntranslatableResults:

    def test_unchanged_result_is_processed_not_written(self, db_session, english_blog_posts):
        manager = TranslationManager(db_session, MemoryCacheBackend(), FakeProvider(echo=True))

        report = manager.bulk_auto_translate('blog', 'es', 100)

        assert report == {'processed': 6, 'translated': 0, 'target_lang': 'es'}
        assert Translation.query.filter_by(lang_code='es').count() == 0

    def test_missing_credentials_leave_gap_for_next_run(self, db_session, english_blog_posts):
        manager = TranslationManager(db_session, MemoryCacheBackend(), FakeProvider(api_key=''))

        first = manager.bulk_auto_translate('blog', 'es', 100)
        second = manager.bulk_auto_translate('blog', 'es', 100)

        assert first['translated'] == 0
        assert second['processed'] == 6

    def test_identical_phrases_hit_the_provider_once(self, manager, provider, db_session):
        for content_id in (1, 2, 3):
            add_translation('testimonial', content_id, 'cta', 'en', 'Read more')

        report = manager.bulk_auto_translate('testimonial', 'it', 100)

        assert report['translated'] == 3
        assert len(provider.calls) == 1
        assert manager.phrase_cache.get_entry('Read more', 'en', 'it').cache_hits == 2


class TestBackfillCacheAndConcurrency:

    def test_backfill_invalidates_batch_cache(self, manager, english_blog_posts):
        manager.save_translation('blog', 1, 'body', 'es', 'x', 'Cuerpo', True)
        assert set(manager.get_translations('blog', 1, 'es')) == {'body'}

        manager.bulk_auto_translate('blog', 'es', 100)

        assert set(manager.get_translations('blog', 1, 'es')) == {'title', 'body'}

    def test_concurrent_run_for_same_pair_is_rejected(self, manager, english_blog_posts):
        assert manager.backfill._claim(('blog', 'es'))
        try:
            with pytest.raises(BackfillInProgress):
                manager.bulk_auto_translate('blog', 'es', 100)

            # A different pair is not blocked
            assert manager.bulk_auto_translate('blog', 'fr', 100)['translated'] == 6
        finally:
            manager.backfill._release(('blog', 'es'))

        assert manager.bulk_auto_translate('blog', 'es', 100)['translated'] == 6

    def test_lock_is_released_after_failure(self, manager, english_blog_posts, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError('gap query failed')

        monkeypatch.setattr(manager.store, 'find_untranslated', broken)
        with pytest.raises(RuntimeError):
            manager.bulk_auto_translate('blog', 'es', 100)
        monkeypatch.undo()

        assert manager.bulk_auto_translate('blog', 'es', 100)['processed'] == 6
