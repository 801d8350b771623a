"""Notification routes for FarmConnect."""
from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from farmconnect.data_service import data_service
from farmconnect.routes.helpers import actor, require_self

notifications_bp = Blueprint('notifications', __name__)


@notifications_bp.route('/', strict_slashes=False)
@login_required
def list_notifications():
    """User's notifications, newest first."""
    user_id = request.args.get('userId', current_user.id)
    require_self(user_id)

    notifications = data_service.get_notifications(user_id)
    if request.args.get('unread', '').lower() == 'true':
        notifications = [n for n in notifications if not n['read']]
    return jsonify(notifications)


@notifications_bp.route('/<notification_id>/read', methods=['PATCH'])
@login_required
def mark_read(notification_id):
    """Mark one notification as read."""
    return jsonify(data_service.mark_notification_read(actor(), notification_id))


@notifications_bp.route('/read-all', methods=['POST'])
@login_required
def mark_all_read():
    """Mark every notification as read."""
    updated = data_service.mark_all_notifications_read(actor())
    return jsonify({'updated': updated})
