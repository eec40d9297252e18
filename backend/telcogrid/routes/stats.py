from flask import Blueprint, jsonify

from telcogrid.auth import get_storage, session_required

stats_bp = Blueprint('stats_bp', __name__)


@stats_bp.route('/dashboard', methods=['GET'])
@session_required()
def dashboard():
    return jsonify(get_storage().get_stats()), 200
