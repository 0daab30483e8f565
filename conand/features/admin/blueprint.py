"""
Admin blueprint and route registration.
"""

from functools import wraps

from flask import Blueprint, jsonify
from flask_login import current_user, login_required

bp = Blueprint("admin", __name__, url_prefix="/admin")


def admin_required(view):
    """Like login_required, but the user must also have the admin role."""

    @wraps(view)
    @login_required
    def wrapper(*args, **kwargs):
        if not getattr(current_user, "is_admin", False):
            return jsonify({"success": False, "error": "Admin role required"}), 403
        return view(*args, **kwargs)

    return wrapper


# Import route modules for side-effects (decorators attach to bp).
from .routes import auth, content_api  # noqa: E402,F401
