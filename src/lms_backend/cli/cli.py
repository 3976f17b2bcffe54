import logging
import click
import uvicorn

from lms_backend.settings import settings

@click.command()
@click.option("--drop", is_flag=True, default=False, help="Drop all tables before creating them")
def init_db(drop):
    """Create the database tables."""

    from lms_backend.database import get_engine
    from lms_backend.model.base import Base

    engine = get_engine()

    if drop:
        click.confirm("This deletes all data. Continue?", abort=True)
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)

    click.echo("Database tables created")

@click.command()
@click.option("--admin-email", "admin_email", default=lambda: settings.ADMIN_EMAIL, show_default="ADMIN_EMAIL")
@click.option("--admin-password", "admin_password", default=lambda: settings.ADMIN_PASSWORD, hide_input=True)
@click.option("--admin-name", "admin_name", default=lambda: settings.ADMIN_NAME, show_default="ADMIN_NAME")
def seed(admin_email, admin_password, admin_name):
    """Seed the default organization, roles, permissions and the admin user."""

    from lms_backend.database import get_db
    from lms_backend.scripts.initialize_system_data import initialize_system_data

    with next(get_db()) as db:
        initialize_system_data(db, admin_email, admin_password, admin_name)

    click.echo("System data initialized")

@click.command()
@click.option("--host", default="0.0.0.0")
@click.option("--port", default=8000, type=int)
@click.option("--reload", is_flag=True, default=False)
def serve(host, port, reload):
    """Run the API server."""

    uvicorn.run("lms_backend.server:app", host=host, port=port, reload=reload, log_level=settings.LOG_LEVEL.lower())

@click.group()
def cli():
    logging.basicConfig(level=settings.LOG_LEVEL)

cli.add_command(init_db,"init-db")
cli.add_command(seed,"seed")
cli.add_command(serve,"serve")

if __name__ == '__main__':
    cli()
