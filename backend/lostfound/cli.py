"""Operator commands, available as ``flask --app lostfound <command>``."""
import click
from flask import Flask, current_app

from .errors import LostFoundError


def register_cli(app: Flask) -> None:
    @app.cli.command("create-staff")
    @click.option("--email", required=True)
    @click.option("--first-name", default=None)
    @click.option("--last-name", default=None)
    @click.option("--password", default=None, help="Optional; staff may sign in through the SSO proxy instead.")
    def create_staff(email: str, first_name: str | None, last_name: str | None, password: str | None) -> None:
        """Create a staff account."""
        from .modules.users.service import create_staff as _create_staff

        try:
            user = _create_staff(email=email, first_name=first_name, last_name=last_name, password=password)
        except LostFoundError as exc:
            raise click.ClickException(exc.message)
        click.echo(f"Created staff user {user.id} <{user.email}>")

    @app.cli.command("set-role")
    @click.argument("email")
    @click.argument("role", type=click.Choice(["staff", "student"]))
    def set_role(email: str, role: str) -> None:
        """Change the role of an existing user."""
        from .modules.users.service import get_user_by_email, set_role as _set_role

        user = get_user_by_email(email)
        if user is None:
            raise click.ClickException(f"No user with email {email}")
        _set_role(user, role)
        click.echo(f"User {user.id} is now {role}")

    @app.cli.command("archive-items")
    @click.option("--days", type=int, default=None, help="Age threshold in days (default ARCHIVE_AFTER_DAYS).")
    def archive_items(days: int | None) -> None:
        """Archive active items older than the threshold."""
        from .modules.items.service import archive_old_items

        threshold = days if days is not None else int(current_app.config["ARCHIVE_AFTER_DAYS"])
        count = archive_old_items(threshold)
        click.echo(f"Archived {count} items")
