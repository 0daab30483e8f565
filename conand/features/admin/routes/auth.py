"""
Admin authentication routes (login/logout).
"""

from flask import current_app, flash, redirect, render_template, request, url_for
from flask_login import login_required, login_user, logout_user

from conand.models.user import User

from ..blueprint import bp


@bp.route("/login", methods=["GET", "POST"])
def login():
    """Admin login page."""
    if request.method == "POST":
        username = request.form.get("username")
        password = request.form.get("password")

        user = User.get_by_username(username)
        if user and user.check_password(password):
            login_user(user)
            current_app.logger.info(f"Admin login: {user.username} ({user.role})")
            return redirect(url_for("admin.content_status"))

        current_app.logger.warning(f"Failed admin login for {username!r}")
        flash("Invalid username or password.", "error")

    return render_template("admin/login.html")


@bp.route("/logout")
@login_required
def logout():
    """Logout admin."""
    logout_user()
    return redirect(url_for("pages.home"))
