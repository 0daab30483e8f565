"""
Seed content: write the bundled sample content file to CONTENT_FILE.
"""

import shutil
from pathlib import Path

import click
from flask import current_app
from flask.cli import with_appcontext

SEED_FILE = Path(__file__).resolve().parent.parent / "content" / "seed.json"


def seed_content(target, force=False):
    """
    Copy the bundled seed document to `target`.

    Returns the target path. Raises FileExistsError when the target exists
    and `force` is not set.
    """
    target = Path(target)
    if target.exists() and not force:
        raise FileExistsError(f"{target} already exists (use --force to overwrite)")
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(SEED_FILE, target)
    return target


@click.command("seed-content")
@click.option("--force", is_flag=True, help="Overwrite an existing content file.")
@with_appcontext
def seed_content_command(force):
    """Write sample events, speakers, sponsors and site settings to CONTENT_FILE."""
    try:
        target = seed_content(current_app.config["CONTENT_FILE"], force=force)
    except FileExistsError as e:
        raise click.ClickException(str(e))
    current_app.extensions.pop("content_store", None)
    click.echo(f"Seeded content into {target}")
