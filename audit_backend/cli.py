import click
import logging
from flask.cli import with_appcontext
from .models import db
from .services.csv_import import import_audits_from_csv, CsvImportError

logger = logging.getLogger(__name__)


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create the audit tables if they do not exist."""
    logger.info("Creating database tables and schema")
    db.create_all()
    logger.info("Database tables created successfully")
    click.echo('Initialized the database.')


@click.command('import-csv')
@click.argument('csv_path', type=click.Path(exists=True, dir_okay=False))
@with_appcontext
def import_csv_command(csv_path):
    """Create or update audits from a school list CSV."""
    db.create_all()
    try:
        summary = import_audits_from_csv(csv_path)
    except CsvImportError as e:
        raise click.ClickException(str(e))

    click.echo(
        f"Imported audits from {csv_path}: {summary['created']} created, "
        f"{summary['updated']} updated, {summary['skipped']} rows skipped"
    )
