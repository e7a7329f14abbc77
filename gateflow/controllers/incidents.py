from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from gateflow.controllers.common import current_principal, incident_desk, json_body

incidents_bp = Blueprint('incidents', __name__, url_prefix='/incidents')


@incidents_bp.route('', methods=['POST'])
@jwt_required()
def create():
    data = json_body()
    incident = incident_desk().report(
        current_principal(),
        title=data.get('title'),
        description=data.get('description'),
        location=data.get('location'),
        severity=data.get('severity'),
        image_url=data.get('imageUrl'),
        anonymous=data.get('anonymous', False)
    )
    return jsonify(incident.to_dict()), 201


@incidents_bp.route('/me', methods=['GET'])
@jwt_required()
def my_incidents():
    incidents = incident_desk().mine(current_principal())
    return jsonify([incident.to_dict() for incident in incidents]), 200


@incidents_bp.route('', methods=['GET'])
@jwt_required()
def find_all():
    incidents = incident_desk().list_all(current_principal())
    return jsonify([incident.to_dict(include_reporter=True) for incident in incidents]), 200


@incidents_bp.route('/<incident_id>/resolve', methods=['PATCH'])
@jwt_required()
def resolve(incident_id):
    data = json_body()
    incident = incident_desk().resolve(current_principal(), incident_id, data.get('actionTaken'))
    return jsonify(incident.to_dict(include_reporter=True)), 200
