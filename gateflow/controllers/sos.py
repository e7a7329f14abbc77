from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from gateflow.controllers.common import current_principal, json_body, sos_registry

sos_bp = Blueprint('sos', __name__, url_prefix='/sos')


@sos_bp.route('/active', methods=['GET'])
@jwt_required()
def get_active():
    broadcasts = sos_registry().list_active(current_principal())
    return jsonify([broadcast.to_dict() for broadcast in broadcasts]), 200


@sos_bp.route('', methods=['GET'])
@jwt_required()
def find_all():
    broadcasts = sos_registry().list_all(current_principal())
    return jsonify([broadcast.to_dict() for broadcast in broadcasts]), 200


@sos_bp.route('', methods=['POST'])
@jwt_required()
def trigger():
    data = json_body()
    broadcast = sos_registry().trigger(current_principal(), data.get('type'), data.get('message'))
    return jsonify(broadcast.to_dict()), 201


@sos_bp.route('/<broadcast_id>/close', methods=['PATCH'])
@jwt_required()
def close(broadcast_id):
    return jsonify(sos_registry().close(current_principal(), broadcast_id).to_dict()), 200
