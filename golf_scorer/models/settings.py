"""Application settings - global key/value configuration.

Read and written through golf_scorer.utils.settings_store, which also knows
the default value of every key.
"""

from ..extensions import db
from datetime import datetime
import uuid
import pytz

# Define EST timezone
EST = pytz.timezone('US/Eastern')


class App_Settings(db.Model):
    __tablename__ = 'app_settings'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    setting_key = db.Column(db.Text, unique=True, nullable=False, index=True)
    setting_value = db.Column(db.Text, nullable=True)
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(EST),
        onupdate=lambda: datetime.now(EST),
        nullable=False
    )
