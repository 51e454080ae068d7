"""Translation record model: one translated field of one content object."""
from datetime import datetime
from polyglot import db

# Stored in place of an absent content id (language-independent strings such
# as UI labels). Real content ids are never negative.
SINGLETON_CONTENT_ID = -1


class TranslationMethod:
    MANUAL = 'manual'
    AUTO = 'auto'


class Translation(db.Model):
    """Translated text keyed by (content_type, content_id, field_name, lang_code)."""
    __tablename__ = 'translations'

    id = db.Column(db.Integer, primary_key=True)
    content_type = db.Column(db.String(50), nullable=False)
    content_id = db.Column(db.Integer, nullable=False, default=SINGLETON_CONTENT_ID)
    field_name = db.Column(db.String(100), nullable=False)
    lang_code = db.Column(db.String(10), nullable=False, index=True)

    original_text = db.Column(db.Text, nullable=True)
    translated_text = db.Column(db.Text, nullable=False)
    manual_override = db.Column(db.Boolean, default=False, nullable=False)
    translation_method = db.Column(db.String(10), default=TranslationMethod.AUTO, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    last_updated = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('content_type', 'content_id', 'field_name', 'lang_code',
                            name='unique_translation_identity'),
        db.Index('ix_translations_content', 'content_type', 'content_id', 'lang_code'),
    )

    @property
    def public_content_id(self):
        """Content id as callers see it (None for singleton strings)."""
        if self.content_id == SINGLETON_CONTENT_ID:
            return None
        return self.content_id

    def to_dict(self):
        return {
            'id': self.id,
            'content_type': self.content_type,
            'content_id': self.public_content_id,
            'field_name': self.field_name,
            'lang_code': self.lang_code,
            'original_text': self.original_text,
            'translated_text': self.translated_text,
            'manual_override': bool(self.manual_override),
            'translation_method': self.translation_method,
            'last_updated': self.last_updated.isoformat() if self.last_updated else None,
        }

    def __repr__(self):
        return (f'<Translation {self.content_type}:{self.public_content_id}:'
                f'{self.field_name} [{self.lang_code}]>')
