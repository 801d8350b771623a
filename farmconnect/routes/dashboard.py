"""Dashboard routes for FarmConnect."""
from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from farmconnect.data_service import data_service

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('/summary')
@login_required
def summary():
    """Cart and notification counts, plus sales figures for farmers."""
    return jsonify(data_service.get_user_summary(current_user.id))
