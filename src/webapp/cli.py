"""
Flask CLI commands.

Usage:
    flask --app webapp.run init-db
    flask --app webapp.run list-users
"""

import click
from flask.cli import with_appcontext
from rich import box
from rich.console import Console
from rich.table import Table

from keeper.base import Base
from keeper.core.users import User
from webapp.extensions import db


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create the keeper tables if they do not exist."""
    Base.metadata.create_all(db.engine)
    click.echo(f"Initialized database at {db.engine.url.render_as_string(hide_password=True)}")


@click.command('list-users')
@with_appcontext
def list_users_command():
    """List registered users and whether each has stored a secret."""
    users = db.session.query(User).order_by(User.user_id).all()
    if not users:
        click.echo("No users registered.")
        return

    table = Table(box=box.SIMPLE)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Username", style="green")
    table.add_column("Kind")
    table.add_column("Secret")

    for user in users:
        table.add_row(
            str(user.user_id),
            user.username,
            "federated" if user.is_federated else "local",
            "yes" if user.has_secret else "no",
        )

    Console().print(table)
    click.echo(f"{len(users)} user(s)")


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(list_users_command)
