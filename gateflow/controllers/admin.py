from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from gateflow.controllers.common import current_principal, json_body, principal_admin

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


@admin_bp.route('/users', methods=['GET'])
@jwt_required()
def get_users():
    principals = principal_admin().list_principals(current_principal())
    return jsonify([principal.to_dict() for principal in principals]), 200


@admin_bp.route('/users/<principal_id>', methods=['GET'])
@jwt_required()
def get_user(principal_id):
    return jsonify(principal_admin().get_principal(current_principal(), principal_id).to_dict()), 200


@admin_bp.route('/users', methods=['POST'])
@jwt_required()
def create_user():
    data = json_body()
    principal = principal_admin().create_principal(
        current_principal(),
        email=data.get('email'),
        password=data.get('password'),
        first_name=data.get('firstName'),
        last_name=data.get('lastName'),
        role=data.get('role'),
        contact_number=data.get('contactNumber'),
        ip_address=request.remote_addr
    )
    return jsonify(principal.to_dict()), 201


@admin_bp.route('/users/<principal_id>/toggle-active', methods=['PATCH'])
@jwt_required()
def toggle_active(principal_id):
    principal = principal_admin().toggle_active(current_principal(), principal_id, request.remote_addr)
    return jsonify(principal.to_dict()), 200


@admin_bp.route('/users/<principal_id>/role', methods=['PUT'])
@jwt_required()
def change_user_role(principal_id):
    data = json_body()
    principal = principal_admin().change_role(
        current_principal(), principal_id, data.get('role'), request.remote_addr
    )
    return jsonify(principal.to_dict()), 200


@admin_bp.route('/users/<principal_id>', methods=['DELETE'])
@jwt_required()
def delete_user(principal_id):
    principal_admin().delete_principal(current_principal(), principal_id, request.remote_addr)
    return jsonify({'message': 'User deleted successfully'}), 200


@admin_bp.route('/logs', methods=['GET'])
@jwt_required()
def get_system_logs():
    result = principal_admin().system_logs(
        current_principal(),
        page=request.args.get('page', 1, type=int),
        per_page=request.args.get('per_page', 50, type=int),
        log_type=request.args.get('type'),
        start_date=request.args.get('start_date'),
        end_date=request.args.get('end_date')
    )
    return jsonify(result), 200
