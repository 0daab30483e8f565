"""
Contact form API.
"""

from flask import current_app, jsonify, request

from .blueprint import bp
from .http_session import get_session
from .services.relay import ContactError, relay_contact_message


@bp.route("/contact", methods=["POST"])
def contact():
    """Relay a contact form submission to the organizers."""
    payload = request.get_json(silent=True)
    try:
        relay_contact_message(payload, current_app.config, get_session())
    except ContactError as e:
        return jsonify({"error": e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Contact form error: {e}", exc_info=True)
        return jsonify({"error": "Failed to send message"}), 500

    return jsonify({"success": True})
