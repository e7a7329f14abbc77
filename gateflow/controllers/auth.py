import logging
from flask import Blueprint, jsonify
from flask_jwt_extended import JWTManager, jwt_required

from gateflow.controllers.common import credential_issuer, current_principal, json_body, principal_store

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')


def init_jwt(app):
    """Initialize JWT with the Flask app.

    Tokens are stateless; the lookup below re-reads the principal on every
    request so a deactivated account stops working before its token expires.
    """
    jwt = JWTManager(app)

    @jwt.user_lookup_loader
    def load_principal(_jwt_header, jwt_data):
        principal = principal_store().get(jwt_data.get('sub'))
        if principal is None or not principal.is_active:
            return None
        return principal

    @jwt.user_lookup_error_loader
    def principal_lookup_failed(_jwt_header, _jwt_data):
        return jsonify({'error': 'Invalid or expired session'}), 401

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({'error': 'Authentication required'}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({'error': 'Invalid or expired session'}), 401

    @jwt.expired_token_loader
    def expired_token(_jwt_header, _jwt_data):
        return jsonify({'error': 'Invalid or expired session'}), 401

    return jwt


@auth_bp.route('/register', methods=['POST'])
def register():
    data = json_body()
    result = credential_issuer().register(
        email=data.get('email'),
        password=data.get('password'),
        first_name=data.get('firstName'),
        last_name=data.get('lastName'),
        role=data.get('role'),
        contact_number=data.get('contactNumber')
    )
    return jsonify(result), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = json_body()
    result = credential_issuer().login(data.get('email'), data.get('password'))
    return jsonify(result), 200


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def me():
    return jsonify(credential_issuer().profile(current_principal())), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    # JWTs are stateless, the client discards the token
    return jsonify({'message': 'Logged out successfully'}), 200


@auth_bp.route('/forgot-password', methods=['POST'])
def forgot_password():
    data = json_body()
    return jsonify(credential_issuer().request_password_reset(data.get('email'))), 200


@auth_bp.route('/reset-password', methods=['POST'])
def reset_password():
    data = json_body()
    result = credential_issuer().reset_password(data.get('token'), data.get('newPassword'))
    return jsonify(result), 200
