from flask import Blueprint, current_app, g, jsonify, request

from telcogrid import limiter
from telcogrid.auth import get_storage, session_or_api_key_required, session_required
from telcogrid.errors import ValidationError
from telcogrid.pagination import page_args, page_payload
from telcogrid.routes import validated_body
from telcogrid.schemas import MsisdnCreate
from telcogrid.storage import DEFAULT_MSISDN_PAGE_SIZE

msisdn_bp = Blueprint('msisdn_bp', __name__)


def _lookup_rate_limit():
    return current_app.config.get('LOOKUP_RATE_LIMIT', '120/minute')


@msisdn_bp.route('/lookup', methods=['GET'])
@limiter.limit(_lookup_rate_limit)
@session_or_api_key_required()
def lookup():
    msisdn = (request.args.get('msisdn') or '').strip()
    if not msisdn:
        raise ValidationError('msisdn: query parameter is required')

    result = get_storage().lookup_msisdn_details(msisdn)
    api_key = g.get('api_key')
    if api_key is not None:
        current_app.logger.info("MSISDN lookup via API key %s", api_key.id)
    return jsonify(result), 200


@msisdn_bp.route('', methods=['GET'])
@session_required()
def list_msisdns():
    page, limit, offset = page_args(DEFAULT_MSISDN_PAGE_SIZE)
    result = get_storage().list_msisdns(
        search=(request.args.get('search') or '').strip() or None,
        limit=limit,
        offset=offset,
    )
    return jsonify(page_payload(result, page, limit)), 200


@msisdn_bp.route('', methods=['POST'])
@session_required()
def create_msisdn():
    payload = validated_body(MsisdnCreate)
    record = get_storage().create_msisdn(payload)
    return jsonify(record.to_dict()), 201
