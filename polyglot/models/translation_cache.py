"""Phrase cache model for storing machine-translated text."""
from datetime import datetime
from polyglot import db


class TranslationCache(db.Model):
    """Cache provider translations to avoid paying for the same text twice."""
    __tablename__ = 'translation_cache'

    id = db.Column(db.Integer, primary_key=True)
    source_text_hash = db.Column(db.String(64), nullable=False, index=True)
    source_lang = db.Column(db.String(10), nullable=False)
    target_lang = db.Column(db.String(10), nullable=False)
    source_text = db.Column(db.Text, nullable=False)  # first 1000 chars only
    translated_text = db.Column(db.Text, nullable=False)
    cache_hits = db.Column(db.Integer, default=0, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('source_text_hash', 'source_lang', 'target_lang',
                            name='unique_phrase_translation'),
    )

    def __repr__(self):
        return (f'<TranslationCache {self.source_text_hash[:8]} '
                f'{self.source_lang}->{self.target_lang} hits={self.cache_hits}>')
