from flask import Blueprint, jsonify

from telcogrid.auth import get_storage, session_required
from telcogrid.routes import validated_body
from telcogrid.schemas import ApiKeyCreate

keys_bp = Blueprint('keys_bp', __name__)


@keys_bp.route('', methods=['GET'])
@session_required()
def list_keys():
    keys = get_storage().list_api_keys()
    return jsonify([key.to_dict() for key in keys]), 200


@keys_bp.route('', methods=['POST'])
@session_required()
def create_key():
    payload = validated_body(ApiKeyCreate)
    key = get_storage().create_api_key(payload)
    return jsonify(key.to_dict()), 201


@keys_bp.route('/<int:key_id>/revoke', methods=['PATCH'])
@session_required()
def revoke_key(key_id):
    key = get_storage().revoke_api_key(key_id)
    return jsonify(key.to_dict()), 200
