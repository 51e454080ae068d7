"""Database reset script for development.

This script drops all tables, recreates them with the current schema and
re-seeds the default languages.
USE ONLY IN DEVELOPMENT - this will delete all data!

Usage:
    python reset_db.py
"""

import sys

# Confirm before proceeding
print("="*60)
print("WARNING: This will DELETE ALL TRANSLATIONS in the database!")
print("This should only be used in development.")
print("="*60)

confirm = input("Type 'yes' to confirm: ")
if confirm.lower() != 'yes':
    print("Aborted.")
    sys.exit(0)

from polyglot import create_app, db
from scripts.seed_languages import seed_languages

app = create_app()

with app.app_context():
    print("\nDropping all tables...")
    db.drop_all()

    print("Creating all tables with current schema...")
    db.create_all()

    print("Seeding supported languages...")
    seed_languages()

    print("\nDatabase reset complete!")
    print("You can now start the server with: python wsgi.py")
