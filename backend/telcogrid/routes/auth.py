from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import create_access_token, set_access_cookies, unset_jwt_cookies

from telcogrid import limiter
from telcogrid.auth import current_operator, get_storage, session_required
from telcogrid.errors import Unauthorized
from telcogrid.routes import validated_body
from telcogrid.schemas import LoginRequest

auth_bp = Blueprint('auth_bp', __name__)


def _login_rate_limit():
    return current_app.config.get('LOGIN_RATE_LIMIT', '10/minute')


@auth_bp.route('/login', methods=['POST'])
@limiter.limit(_login_rate_limit)
def login():
    credentials = validated_body(LoginRequest)
    storage = get_storage()

    operator = storage.get_operator_by_email(credentials.email)
    if operator is None or not operator.is_active or not operator.check_password(credentials.password):
        current_app.logger.warning("Failed login for %s", credentials.email)
        raise Unauthorized('Invalid email or password')

    storage.touch_operator_login(operator)
    token = create_access_token(identity=str(operator.id))
    response = jsonify({'token': token, 'operator': operator.to_dict()})
    set_access_cookies(response, token)
    return response, 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    response = jsonify({'success': True})
    unset_jwt_cookies(response)
    return response, 200


@auth_bp.route('/user', methods=['GET'])
@session_required()
def me():
    return jsonify(current_operator().to_dict()), 200
