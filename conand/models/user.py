"""
User model for the admin hooks.

Users live in a small JSON file (ADMIN_CONFIG_FILE, by default
instance/admin_config.json):

    {"users": [{"username": "...", "password_hash": "...", "role": "admin"}]}

When the file is missing it is bootstrapped from ADMIN_USERNAME plus
ADMIN_PASSWORD_HASH or ADMIN_PASSWORD. Without those there are no users and
nobody can log in.
"""
import json
import logging
import os
from pathlib import Path

from flask import current_app
from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
ROLES = (ROLE_ADMIN, ROLE_EDITOR)


class User(UserMixin):
    """Admin user; `role` decides which admin hooks it may call."""

    def __init__(self, username, password_hash, role=ROLE_EDITOR):
        self.id = username  # Flask-Login uses 'id'
        self.username = username
        self.password_hash = password_hash
        self.role = role if role in ROLES else ROLE_EDITOR

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    @classmethod
    def _get_config_path(cls):
        return Path(current_app.config["ADMIN_CONFIG_FILE"])

    @classmethod
    def _bootstrap_config(cls):
        """Initial user list from the environment."""
        username = (os.environ.get("ADMIN_USERNAME") or "").strip()
        password_hash = os.environ.get("ADMIN_PASSWORD_HASH")
        password = os.environ.get("ADMIN_PASSWORD")

        if not username or not (password_hash or password):
            return {"users": []}

        if not password_hash:
            password_hash = generate_password_hash(password)
        cfg = {"users": [{"username": username, "password_hash": password_hash, "role": ROLE_ADMIN}]}
        cls._save_config(cfg)
        return cfg

    @classmethod
    def _load_config(cls):
        config_path = cls._get_config_path()
        if not config_path.exists():
            return cls._bootstrap_config()
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read admin config {config_path}: {e}")
            return {"users": []}
        if not isinstance(data, dict) or not isinstance(data.get("users"), list):
            logger.error(f"Admin config {config_path} has no user list")
            return {"users": []}
        return data

    @classmethod
    def _save_config(cls, config):
        config_path = cls._get_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)

    @classmethod
    def get_by_username(cls, username):
        if not username:
            return None
        for entry in cls._load_config()["users"]:
            if isinstance(entry, dict) and entry.get("username") == username:
                return User(username, entry.get("password_hash") or "", entry.get("role", ROLE_EDITOR))
        return None

    @classmethod
    def create(cls, username, password, role=ROLE_EDITOR):
        """Add a user. Raises ValueError if the username is taken or the role unknown."""
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        config = cls._load_config()
        if any(entry.get("username") == username for entry in config["users"]):
            raise ValueError(f"User already exists: {username}")
        config["users"].append({"username": username, "password_hash": generate_password_hash(password), "role": role})
        cls._save_config(config)
        return cls.get_by_username(username)

    def check_password(self, password):
        if not self.password_hash or not password:
            return False
        return check_password_hash(self.password_hash, password)
