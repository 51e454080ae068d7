"""
Tests for the public translation endpoints and the admin actions on them.
"""

from faker import Faker

from polyglot.models import SupportedLanguage, Translation
from polyglot.services.resolver import ResolutionError

from conftest import add_translation

fake = Faker()


class TestHealth:

    def test_health(self, client):
        resp = client.get('/health')
        assert resp.status_code == 200
        assert resp.get_json()['status'] == 'ok'


class TestGetTranslation:
    """Tests for GET /api/translations"""

    def test_fallback_when_missing(self, client, manager):
        resp = client.get('/api/translations?content_type=blog&content_id=1'
                          '&field_name=title&lang_code=es&fallback=Hello')

        assert resp.status_code == 200
        assert resp.get_json() == {'success': True, 'translation': 'Hello', 'lang_code': 'es'}

    def test_stored_translation(self, client, manager):
        add_translation('blog', 1, 'title', 'es', 'Hola')

        resp = client.get('/api/translations', query_string={
            'content_type': 'blog', 'content_id': 1, 'field_name': 'title', 'lang_code': 'es',
        })

        assert resp.get_json()['translation'] == 'Hola'

    def test_lang_code_defaults_to_english(self, client, manager):
        add_translation('ui', None, 'footer', 'en', 'All rights reserved')

        resp = client.get('/api/translations?content_type=ui&field_name=footer')

        data = resp.get_json()
        assert data['lang_code'] == 'en'
        assert data['translation'] == 'All rights reserved'

    def test_missing_params(self, client, manager):
        resp = client.get('/api/translations?content_type=blog')

        assert resp.status_code == 400
        assert 'error' in resp.get_json()

    def test_invalid_content_id(self, client, manager):
        resp = client.get('/api/translations?content_type=blog&field_name=title&content_id=abc')

        assert resp.status_code == 400

    def test_store_failure_serves_fallback(self, client, manager, monkeypatch):
        def broken(*args, **kwargs):
            raise ResolutionError('db down')

        monkeypatch.setattr(manager.resolver, 'get_one', broken)
        resp = client.get('/api/translations?content_type=blog&field_name=title'
                          '&lang_code=es&fallback=Hello')

        assert resp.status_code == 200
        assert resp.get_json()['translation'] == 'Hello'


class TestGetBatch:
    """Tests for GET /api/translations/batch"""

    def test_batch(self, client, manager):
        add_translation('blog', 9, 'title', 'fr', 'Titre', manual=True)
        add_translation('blog', 9, 'body', 'fr', 'Corps')

        resp = client.get('/api/translations/batch?content_type=blog&content_id=9&lang_code=fr')

        assert resp.status_code == 200
        data = resp.get_json()
        assert data['content_id'] == 9
        assert data['translations'] == {
            'title': {'text': 'Titre', 'manual': True},
            'body': {'text': 'Corps', 'manual': False},
        }

    def test_batch_empty(self, client, manager):
        resp = client.get('/api/translations/batch?content_type=blog&content_id=9&lang_code=fr')

        assert resp.status_code == 200
        assert resp.get_json()['translations'] == {}

    def test_batch_requires_content_id(self, client, manager):
        resp = client.get('/api/translations/batch?content_type=blog')

        assert resp.status_code == 400


class TestLanguagesAndStats:

    def test_languages_default_to_active_only(self, client, manager, db_session):
        db_session.add(SupportedLanguage(lang_code='es', lang_name='Spanish',
                                         native_name='Español', sort_order=2))
        db_session.add(SupportedLanguage(lang_code='en', lang_name='English',
                                         native_name='English', sort_order=1))
        db_session.add(SupportedLanguage(lang_code='he', lang_name='Hebrew', native_name='עברית',
                                         sort_order=3, rtl=True, active=False))
        db_session.commit()

        active = client.get('/api/translations/languages').get_json()['languages']
        everything = client.get('/api/translations/languages?active_only=false').get_json()['languages']

        assert [lang['lang_code'] for lang in active] == ['en', 'es']
        assert [lang['lang_code'] for lang in everything] == ['en', 'es', 'he']
        assert everything[2]['rtl'] is True

    def test_stats(self, client, manager, english_blog_posts):
        add_translation('blog', 1, 'title', 'es', 'Uno')

        resp = client.get('/api/translations/stats?lang_code=es')

        assert resp.status_code == 200
        assert resp.get_json()['stats'][0]['total'] == 1


class TestSaveAction:
    """Tests for POST /api/translations (action=save)"""

    def _payload(self, **overrides):
        data = {
            'content_type': 'blog',
            'content_id': 42,
            'field_name': 'title',
            'lang_code': 'es',
            'original_text': 'Hello',
            'translated_text': 'Hola',
            'manual_override': True,
        }
        data.update(overrides)
        return data

    def test_requires_token(self, client, manager):
        resp = client.post('/api/translations', json=self._payload())

        assert resp.status_code == 401

    def test_requires_admin_role(self, client, manager, editor_headers):
        resp = client.post('/api/translations', json=self._payload(), headers=editor_headers)

        assert resp.status_code == 403

    def test_invalid_token(self, client, manager):
        resp = client.post('/api/translations', json=self._payload(),
                           headers={'Authorization': 'Bearer not-a-jwt'})

        assert resp.status_code == 401

    def test_save_then_read(self, client, manager, admin_headers):
        resp = client.post('/api/translations', json=self._payload(), headers=admin_headers)

        assert resp.status_code == 200
        assert resp.get_json()['success'] is True

        read = client.get('/api/translations?content_type=blog&content_id=42'
                          '&field_name=title&lang_code=es&fallback=fallback')
        assert read.get_json()['translation'] == 'Hola'
        record = Translation.query.filter_by(content_id=42, lang_code='es').one()
        assert record.manual_override is True

    def test_missing_field(self, client, manager, admin_headers):
        payload = self._payload()
        del payload['translated_text']

        resp = client.post('/api/translations', json=payload, headers=admin_headers)

        assert resp.status_code == 400
        assert 'translated_text' in resp.get_json()['error']

    def test_invalid_json(self, client, manager, admin_headers):
        resp = client.post('/api/translations', data='not json',
                           content_type='application/json', headers=admin_headers)

        assert resp.status_code == 400

    def test_unknown_action(self, client, manager, admin_headers):
        resp = client.post('/api/translations', json={'action': 'explode'}, headers=admin_headers)

        assert resp.status_code == 400

    def test_failed_save_is_500(self, client, manager, admin_headers, monkeypatch):
        monkeypatch.setattr(manager.resolver, 'save', lambda *a, **k: False)

        resp = client.post('/api/translations', json=self._payload(), headers=admin_headers)

        assert resp.status_code == 500
        assert resp.get_json()['success'] is False


class TestAutoAndBulkActions:

    def test_auto_translate_action(self, client, manager, admin_headers):
        resp = client.post('/api/translations', json={
            'action': 'auto_translate', 'text': 'Hello', 'target_lang': 'es',
        }, headers=admin_headers)

        assert resp.status_code == 200
        assert resp.get_json() == {
            'success': True,
            'original': 'Hello',
            'translated': '[es] Hello',
            'source_lang': 'en',
            'target_lang': 'es',
        }

    def test_auto_translate_requires_text(self, client, manager, admin_headers):
        resp = client.post('/api/translations', json={
            'action': 'auto_translate', 'target_lang': 'es',
        }, headers=admin_headers)

        assert resp.status_code == 400

    def test_bulk_translate_default_limit(self, client, manager, admin_headers, db_session):
        for content_id in range(1, 61):
            add_translation('portfolio', content_id, 'title', 'en', fake.sentence(nb_words=3))

        resp = client.post('/api/translations', json={
            'action': 'bulk_translate', 'content_type': 'portfolio', 'target_lang': 'de',
        }, headers=admin_headers)

        assert resp.status_code == 200
        assert resp.get_json()['result']['processed'] == 50

    def test_bulk_translate_in_progress_is_409(self, client, manager, admin_headers, english_blog_posts):
        manager.backfill._claim(('blog', 'es'))
        try:
            resp = client.post('/api/translations', json={
                'action': 'bulk_translate', 'content_type': 'blog', 'target_lang': 'es',
            }, headers=admin_headers)
        finally:
            manager.backfill._release(('blog', 'es'))

        assert resp.status_code == 409


class TestPutUpdate:
    """Tests for PUT /api/translations"""

    def test_manual_update_by_id(self, client, manager, admin_headers):
        record = add_translation('blog', 3, 'title', 'es', '[es] Hello', original_text='Hello')

        resp = client.put('/api/translations', json={
            'id': record.id,
            'content_type': 'blog',
            'content_id': 3,
            'field_name': 'title',
            'lang_code': 'es',
            'original_text': 'Hello',
            'translated_text': 'Hola',
        }, headers=admin_headers)

        assert resp.status_code == 200
        updated = Translation.query.filter_by(content_id=3, lang_code='es').one()
        assert updated.translated_text == 'Hola'
        assert updated.manual_override is True

    def test_language_status(self, client, manager, admin_headers, db_session):
        db_session.add(SupportedLanguage(lang_code='es', lang_name='Spanish',
                                         native_name='Español', sort_order=1))
        db_session.commit()
        client.get('/api/translations/languages')

        resp = client.put('/api/translations', json={'lang_code': 'es', 'active': False},
                          headers=admin_headers)

        assert resp.status_code == 200
        assert client.get('/api/translations/languages').get_json()['languages'] == []

    def test_invalid_request(self, client, manager, admin_headers):
        resp = client.put('/api/translations', json={'foo': 'bar'}, headers=admin_headers)

        assert resp.status_code == 400
