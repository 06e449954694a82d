"""Flask CLI commands for bootstrap and scheduled jobs.

Usage:
    flask --app erp create-user admin@example.com "Site Admin" "Super Admin" --password ChangeMe123!
    flask --app erp scan-duplicates           # e.g. from cron
"""
from __future__ import annotations
import click
from sqlalchemy import select
from erp.constants.permissions import Role
from erp.models.authz import User


def register_cli(app):
    @app.cli.command('create-user')
    @click.argument('email')
    @click.argument('name')
    @click.argument('role', type=click.Choice([r.value for r in Role]))
    @click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
    def create_user(email, name, role, password):
        """Create a user account with one of the fixed roles."""
        from erp import get_db
        session = get_db()
        if session.execute(select(User).where(User.email==email)).scalar_one_or_none():
            raise click.ClickException(f'user {email} exists')
        user = User(name=name, email=email, password_hash='', role=role)
        user.set_password(password)
        session.add(user)
        session.commit()
        click.echo(f'created {email} ({role})')

    @app.cli.command('scan-duplicates')
    def scan_duplicates():
        """Run a duplicate scan as the system actor."""
        from erp import get_db
        from erp.services.duplicates import scan
        from erp.services.policy import SYSTEM_ACTOR
        from erp.services.store import SqlEntityStore
        result = scan(SYSTEM_ACTOR, SqlEntityStore(get_db()))
        click.echo(f"alerts created: {result['alerts_created']}")
