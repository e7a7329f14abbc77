from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from gateflow.controllers.common import current_principal, entry_ledger, json_body, qr_resolver

entry_logs_bp = Blueprint('entry_logs', __name__, url_prefix='/entry-logs')


@entry_logs_bp.route('/scan', methods=['POST'])
@jwt_required()
def create_from_scan():
    """Guard scans a QR code and records an entry or exit."""
    data = json_body()
    record = entry_ledger().record_scan(
        current_principal(),
        data.get('qrToken'),
        data.get('type'),
        data.get('location')
    )
    return jsonify(record.to_dict()), 201


@entry_logs_bp.route('/lookup/<qr_token>', methods=['GET'])
@jwt_required()
def lookup_by_qr(qr_token):
    """Guard pre-scan verification."""
    return jsonify(qr_resolver().resolve_by_qr(current_principal(), qr_token)), 200


@entry_logs_bp.route('/recent', methods=['GET'])
@jwt_required()
def recent():
    records = entry_ledger().recent(current_principal())
    return jsonify([record.to_dict() for record in records]), 200


@entry_logs_bp.route('/me', methods=['GET'])
@jwt_required()
def my_entries():
    records = entry_ledger().for_principal(current_principal())
    return jsonify([record.to_dict() for record in records]), 200


@entry_logs_bp.route('', methods=['GET'])
@jwt_required()
def all_entries():
    records = entry_ledger().recent(current_principal(), request.args.get('take', type=int))
    return jsonify([record.to_dict() for record in records]), 200
