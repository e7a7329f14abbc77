from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from gateflow.controllers.common import analytics_overview, current_principal

analytics_bp = Blueprint('analytics', __name__, url_prefix='/analytics')


@analytics_bp.route('/overview', methods=['GET'])
@jwt_required()
def overview():
    return jsonify(analytics_overview().overview(current_principal())), 200
