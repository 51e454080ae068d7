"""Supported language model."""
from polyglot import db


class SupportedLanguage(db.Model):
    """A language the site offers. Inactive languages keep their translations."""

    __tablename__ = 'supported_languages'

    id = db.Column(db.Integer, primary_key=True)
    lang_code = db.Column(db.String(10), unique=True, nullable=False, index=True)  # e.g., 'es'
    lang_name = db.Column(db.String(100), nullable=False)  # e.g., 'Spanish'
    native_name = db.Column(db.String(100), nullable=False)  # e.g., 'Español'
    flag_icon = db.Column(db.String(20), nullable=True)
    rtl = db.Column(db.Boolean, default=False, nullable=False)
    active = db.Column(db.Boolean, default=True, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)

    def to_dict(self):
        """Convert language to dictionary."""
        return {
            'lang_code': self.lang_code,
            'lang_name': self.lang_name,
            'native_name': self.native_name,
            'flag_icon': self.flag_icon,
            'rtl': self.rtl,
            'active': self.active,
            'sort_order': self.sort_order,
        }

    def __repr__(self):
        return f'<SupportedLanguage {self.lang_code}: {self.lang_name}>'
