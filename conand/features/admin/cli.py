"""
Admin user management from the command line.
"""

import click
from flask.cli import with_appcontext

from conand.models.user import ROLE_EDITOR, ROLES, User


@click.command("create-user")
@click.argument("username")
@click.option("--role", type=click.Choice(ROLES), default=ROLE_EDITOR, show_default=True)
@click.password_option()
@with_appcontext
def create_user_command(username, role, password):
    """Add an admin user to ADMIN_CONFIG_FILE."""
    try:
        user = User.create(username, password, role=role)
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(f"Created {user.role} user {user.username}")
