"""
Contact API blueprint and route registration.
"""

from flask import Blueprint

bp = Blueprint("contact", __name__, url_prefix="/api")

# Import routes for side effects (decorators attach to bp)
from . import routes  # noqa: E402,F401
