"""
Pytest configuration and fixtures for testing the translation backend.
"""

import os
import sys
import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from polyglot import create_app, db
from polyglot.models import Translation
from polyglot.services import EXTENSION_KEY, TranslationManager
from polyglot.services.cache import MemoryCacheBackend
from polyglot.services.providers import ProviderError, TranslationProvider
from polyglot.services.store import content_key
from polyglot.utils.auth import generate_token

fake = Faker()


class FakeProvider(TranslationProvider):
    """Provider that prefixes the target language and counts calls."""

    name = 'fake'

    def __init__(self, api_key='test-key', fail=False, echo=False, **kwargs):
        super().__init__(api_key, **kwargs)
        self.fail = fail
        self.echo = echo
        self.calls = []

    def _call(self, text, source_lang, target_lang):
        self.calls.append((text, source_lang, target_lang))
        if self.fail:
            raise ProviderError('provider unavailable')
        if self.echo:
            return text
        return f'[{target_lang}] {text}'


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    os.environ['FLASK_ENV'] = 'testing'

    app = create_app('testing')

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create a fresh database session for each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        yield db.session
        db.session.rollback()


@pytest.fixture
def cache():
    return MemoryCacheBackend()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def manager(app, db_session, cache, provider):
    """Fresh manager (memory cache, fake provider) installed on the app."""
    previous = app.extensions[EXTENSION_KEY]
    manager = TranslationManager(db_session, cache, provider)
    app.extensions[EXTENSION_KEY] = manager
    yield manager
    app.extensions[EXTENSION_KEY] = previous


def add_translation(content_type, content_id, field_name, lang_code, text,
                    original_text=None, manual=False):
    """Insert a record directly, bypassing the resolver and its cache."""
    record = Translation(
        content_type=content_type,
        content_id=content_key(content_id),
        field_name=field_name,
        lang_code=lang_code,
        original_text=original_text if original_text is not None else text,
        translated_text=text,
        manual_override=manual,
        translation_method='manual' if manual else 'auto',
    )
    db.session.add(record)
    db.session.commit()
    return record


@pytest.fixture
def english_blog_posts(db_session):
    """Three blog posts with English title and body."""
    posts = {}
    for content_id in (1, 2, 3):
        title = fake.sentence(nb_words=4)
        body = fake.paragraph()
        add_translation('blog', content_id, 'title', 'en', title)
        add_translation('blog', content_id, 'body', 'en', body)
        posts[content_id] = {'title': title, 'body': body}
    return posts


@pytest.fixture
def admin_headers(app):
    with app.app_context():
        token = generate_token(1, role='admin')
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def editor_headers(app):
    with app.app_context():
        token = generate_token(2, role='editor')
    return {'Authorization': f'Bearer {token}'}
