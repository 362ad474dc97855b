"""
Settings Blueprint

Read and change the global application settings (e.g. the app logo).
"""

from flask import Blueprint, jsonify

from golf_scorer.utils.settings_store import all_settings, get_setting, set_setting
from golf_scorer.utils.transactions import json_errors
from golf_scorer.utils.request_helpers import get_payload

settings_bp = Blueprint('settings', __name__)


@settings_bp.route('/', methods=['GET'])
def index():
    return jsonify({'settings': all_settings()})


@settings_bp.route('/<setting_key>', methods=['GET'])
def view_setting(setting_key):
    value = get_setting(setting_key)
    if value is None:
        return jsonify({'error': f"Unknown setting '{setting_key}'"}), 404
    return jsonify({'key': setting_key, 'value': value})


@settings_bp.route('/<setting_key>', methods=['PUT', 'POST'])
@json_errors
def update_setting(setting_key):
    """
    Store a setting value.

    JSON Fields:
        - value: new value (required, may be an empty string)
    """
    payload = get_payload()
    if 'value' not in payload:
        raise ValueError("Missing required field(s): value")

    value = payload['value']
    row = set_setting(setting_key, '' if value is None else str(value))
    return jsonify({'key': row.setting_key, 'value': row.setting_value})
