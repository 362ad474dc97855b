"""
Global application settings.

A small key/value store on top of App_Settings. Every known key has a
documented default in DEFAULT_SETTINGS:

    app_logo_url: URL of the logo shown across the application ('' = none)

Defaults are written once by seed_default_settings() at start-up and never
overwrite a stored value.
"""

import logging

from golf_scorer.extensions import db
from golf_scorer.models.settings import App_Settings
from golf_scorer.utils.transactions import atomic_operation

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    'app_logo_url': '',
}


def seed_default_settings():
    """
    Insert every default setting that is not stored yet.

    Existing rows are left untouched, so running this again never creates a
    duplicate or resets a value that was changed.

    Returns:
        list: keys that were inserted
    """
    existing = {row.setting_key for row in App_Settings.query.all()}
    inserted = []
    for key, value in DEFAULT_SETTINGS.items():
        if key in existing:
            continue
        db.session.add(App_Settings(setting_key=key, setting_value=value))
        inserted.append(key)

    if inserted:
        db.session.commit()
    return inserted


def get_setting(key, default=None):
    """Return the stored value of key, else default, else the documented default."""
    row = App_Settings.query.filter_by(setting_key=key).first()
    if row is not None and row.setting_value is not None:
        return row.setting_value
    if default is not None:
        return default
    return DEFAULT_SETTINGS.get(key)


@atomic_operation
def set_setting(key, value):
    """Store value under key, creating the row if needed."""
    if not key:
        raise ValueError("Setting key is required")

    row = App_Settings.query.filter_by(setting_key=key).first()
    if row is None:
        row = App_Settings(setting_key=key, setting_value=value)
        db.session.add(row)
    else:
        row.setting_value = value

    logger.info(f"Setting '{key}' updated")
    return row


def all_settings():
    """Every stored setting merged over the defaults."""
    settings = dict(DEFAULT_SETTINGS)
    for row in App_Settings.query.all():
        settings[row.setting_key] = row.setting_value
    return settings
