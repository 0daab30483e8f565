"""
Public pages blueprint and route registration.
"""

from flask import Blueprint

bp = Blueprint("pages", __name__)

# Import routes for side effects (decorators attach to bp)
from . import routes  # noqa: E402,F401
