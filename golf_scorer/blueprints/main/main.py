"""
Main Blueprint

Landing endpoint for the front end: the active tournament and the app logo.
"""

from flask import Blueprint, jsonify

from golf_scorer.utils.active_tournament import get_active_tournament
from golf_scorer.utils.settings_store import get_setting

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    tournament = get_active_tournament()
    return jsonify({
        'app_logo_url': get_setting('app_logo_url'),
        'active_tournament': tournament.to_dict() if tournament else None,
    })
