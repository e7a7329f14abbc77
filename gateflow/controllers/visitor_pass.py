from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from gateflow.controllers.common import current_principal, json_body, qr_resolver, visitor_pass_lifecycle

visitor_pass_bp = Blueprint('visitor_pass', __name__, url_prefix='/visitor-passes')


@visitor_pass_bp.route('', methods=['POST'])
def create():
    """Public: visitors don't need an account."""
    data = json_body()
    visitor_pass = visitor_pass_lifecycle().create(
        full_name=data.get('fullName'),
        contact_number=data.get('contactNumber'),
        purpose=data.get('purpose'),
        person_to_visit=data.get('personToVisit'),
        visit_date=data.get('visitDate'),
        time_window_start=data.get('timeWindowStart'),
        time_window_end=data.get('timeWindowEnd'),
        email=data.get('email'),
        address=data.get('address')
    )
    return jsonify(visitor_pass.to_dict()), 201


@visitor_pass_bp.route('', methods=['GET'])
@jwt_required()
def find_all():
    passes = visitor_pass_lifecycle().list(current_principal())
    return jsonify([visitor_pass.to_dict() for visitor_pass in passes]), 200


@visitor_pass_bp.route('/verify/<qr_token>', methods=['GET'])
@jwt_required()
def verify(qr_token):
    return jsonify(qr_resolver().resolve_visitor_by_qr(current_principal(), qr_token)), 200


@visitor_pass_bp.route('/<pass_id>', methods=['GET'])
@jwt_required()
def find_one(pass_id):
    return jsonify(visitor_pass_lifecycle().get(current_principal(), pass_id).to_dict()), 200


@visitor_pass_bp.route('/<pass_id>/approve', methods=['PATCH'])
@jwt_required()
def approve(pass_id):
    return jsonify(visitor_pass_lifecycle().approve(current_principal(), pass_id).to_dict()), 200


@visitor_pass_bp.route('/<pass_id>/reject', methods=['PATCH'])
@jwt_required()
def reject(pass_id):
    return jsonify(visitor_pass_lifecycle().reject(current_principal(), pass_id).to_dict()), 200
