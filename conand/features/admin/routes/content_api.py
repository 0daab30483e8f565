"""
Admin content API: inspect the content store and drop its caches.
"""

from flask import current_app, jsonify
from flask_login import login_required

from conand.features.pages.services.repository import get_content_store
from conand.utils.content import clear_cache

from ..blueprint import admin_required, bp


@bp.route("/api/content/status", methods=["GET"])
@login_required
def content_status():
    """Content file path, availability, document counts and last load time."""
    try:
        return jsonify({"success": True, "status": get_content_store().status()})
    except Exception as e:
        current_app.logger.error(f"Error reading content status: {e}", exc_info=True)
        return jsonify({"success": False, "error": str(e)}), 500


@bp.route("/api/content/reload", methods=["POST"])
@admin_required
def reload_content():
    """Forget cached content and translations so the next request reads the files again."""
    try:
        store = get_content_store()
        store.reload()
        clear_cache()
        current_app.logger.info(f"Content caches cleared ({store.path})")
        return jsonify({"success": True, "status": store.status()})
    except Exception as e:
        current_app.logger.error(f"Error reloading content: {e}", exc_info=True)
        return jsonify({"success": False, "error": str(e)}), 500
