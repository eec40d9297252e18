from flask import Blueprint, jsonify, request

from telcogrid.auth import get_storage, session_required
from telcogrid.pagination import page_args, page_payload
from telcogrid.routes import validated_body
from telcogrid.schemas import TowerCreate, TowerUpdate

DEFAULT_PAGE_SIZE = 10

bts_bp = Blueprint('bts_bp', __name__)


@bts_bp.route('', methods=['GET'])
@session_required()
def list_towers():
    page, limit, offset = page_args(DEFAULT_PAGE_SIZE)
    result = get_storage().list_towers(
        search=(request.args.get('search') or '').strip() or None,
        operator=(request.args.get('operator') or '').strip() or None,
        limit=limit,
        offset=offset,
    )
    return jsonify(page_payload(result, page, limit)), 200


@bts_bp.route('/<int:tower_id>', methods=['GET'])
@session_required()
def get_tower(tower_id):
    return jsonify(get_storage().get_tower(tower_id).to_dict()), 200


@bts_bp.route('', methods=['POST'])
@session_required()
def create_tower():
    payload = validated_body(TowerCreate)
    tower = get_storage().create_tower(payload)
    return jsonify(tower.to_dict()), 201


@bts_bp.route('/<int:tower_id>', methods=['PUT'])
@session_required()
def update_tower(tower_id):
    payload = validated_body(TowerUpdate)
    tower = get_storage().update_tower(tower_id, payload)
    return jsonify(tower.to_dict()), 200


@bts_bp.route('/<int:tower_id>', methods=['DELETE'])
@session_required()
def delete_tower(tower_id):
    # Unknown ids are not an error.
    get_storage().delete_tower(tower_id)
    return '', 204
