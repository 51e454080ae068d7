#!/usr/bin/env python3
"""Seed the supported languages table with the default language set."""

import sys
import os

# Add parent directory to path to import app modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from polyglot import create_app
from polyglot.services import get_translation_manager

# Ordered as they appear in the language switcher
LANGUAGES_DATA = [
    {'lang_code': 'en', 'lang_name': 'English', 'native_name': 'English', 'flag_icon': '🇬🇧'},
    {'lang_code': 'es', 'lang_name': 'Spanish', 'native_name': 'Español', 'flag_icon': '🇪🇸'},
    {'lang_code': 'fr', 'lang_name': 'French', 'native_name': 'Français', 'flag_icon': '🇫🇷'},
    {'lang_code': 'de', 'lang_name': 'German', 'native_name': 'Deutsch', 'flag_icon': '🇩🇪'},
    {'lang_code': 'it', 'lang_name': 'Italian', 'native_name': 'Italiano', 'flag_icon': '🇮🇹'},
    {'lang_code': 'pt', 'lang_name': 'Portuguese', 'native_name': 'Português', 'flag_icon': '🇵🇹'},
    {'lang_code': 'nl', 'lang_name': 'Dutch', 'native_name': 'Nederlands', 'flag_icon': '🇳🇱'},
    {'lang_code': 'ru', 'lang_name': 'Russian', 'native_name': 'Русский', 'flag_icon': '🇷🇺'},
    {'lang_code': 'zh', 'lang_name': 'Chinese', 'native_name': '中文', 'flag_icon': '🇨🇳'},
    {'lang_code': 'ja', 'lang_name': 'Japanese', 'native_name': '日本語', 'flag_icon': '🇯🇵'},
    {'lang_code': 'ar', 'lang_name': 'Arabic', 'native_name': 'العربية', 'flag_icon': '🇸🇦', 'rtl': True},
    {'lang_code': 'he', 'lang_name': 'Hebrew', 'native_name': 'עברית', 'flag_icon': '🇮🇱', 'rtl': True,
     'active': False},
]


def seed_languages(manager=None):
    """Insert or update every default language. Returns the number written."""
    manager = manager or get_translation_manager()
    written = 0
    for sort_order, lang in enumerate(LANGUAGES_DATA, start=1):
        ok = manager.languages.register_language(
            lang['lang_code'],
            lang['lang_name'],
            lang['native_name'],
            flag_icon=lang.get('flag_icon'),
            rtl=lang.get('rtl', False),
            active=lang.get('active', True),
            sort_order=sort_order,
        )
        if ok:
            written += 1
            print(f"  ✓ {lang['lang_code']:<4} {lang['lang_name']}")
        else:
            print(f"  ✗ {lang['lang_code']:<4} failed")
    return written


if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        print("Seeding supported languages...")
        count = seed_languages()
        print(f"\n✅ {count}/{len(LANGUAGES_DATA)} languages seeded")
        sys.exit(0 if count == len(LANGUAGES_DATA) else 1)
