# expense_tracker/cli.py
import logging

import click
import uvicorn

from expense_tracker.config import load_config
from expense_tracker.database import compute_summary, connect, create_transaction, list_transactions
from expense_tracker.errors import StorageError
from expense_tracker.manual import load_manual_transactions
from expense_tracker.outputs import get_output
from expense_tracker.web import create_app

logger = logging.getLogger(__name__)

db_option = click.option(
    '--db', 'db_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='SQLite database file (default: db_path from config)'
)


@click.group()
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Path to config.yaml'
)
@click.pass_context
def main(ctx, config_path):
    """
    Track income and expense transactions in a local SQLite database
    and serve them over a JSON API.
    """
    cfg = load_config(config_path)
    logging.basicConfig(level=str(cfg['log_level']).upper())
    ctx.obj = cfg


@main.command()
@click.option('--host', default=None, help='Host to bind (default: host from config)')
@click.option('--port', type=int, default=None, help='Port to bind (default: 3000)')
@db_option
@click.pass_obj
def serve(cfg, host, port, db_path):
    """Run the transactions API."""
    if host is None:
        host = cfg['host']
    if port is None:
        port = cfg['port']
    db_path = db_path or cfg['db_path']

    app = create_app(db_path)
    logger.info("Server running on port %s", port)
    uvicorn.run(app, host=host, port=port, log_level=str(cfg['log_level']).lower())


@main.command()
@db_option
@click.pass_obj
def summary(cfg, db_path):
    """Print total income, total expense and balance."""
    db_path = db_path or cfg['db_path']
    try:
        conn = connect(db_path)
        try:
            result = compute_summary(conn)
        finally:
            conn.close()
    except StorageError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Total income:  {result.total_income:.2f}")
    click.echo(f"Total expense: {result.total_expense:.2f}")
    click.echo(f"Balance:       {result.balance:.2f}")


@main.command(name='import')
@click.argument('manual_file', type=click.Path(exists=True, dir_okay=False))
@db_option
@click.pass_obj
def import_transactions(cfg, manual_file, db_path):
    """Insert the transactions listed in a YAML file."""
    db_path = db_path or cfg['db_path']
    try:
        payloads = load_manual_transactions(manual_file)
    except ValueError as exc:
        raise click.ClickException(f"Error loading manual transactions: {exc}") from exc

    try:
        conn = connect(db_path)
        try:
            for payload in payloads:
                create_transaction(conn, *payload.as_row())
        finally:
            conn.close()
    except StorageError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Imported {len(payloads)} transaction(s) into {db_path}.")


@main.command(name='export')
@db_option
@click.option(
    '--output', 'output_format',
    default='csv',
    type=click.Choice(['csv']),
    help='Output target'
)
@click.option(
    '--output-dir', 'output_dir',
    default=None,
    type=click.Path(file_okay=False),
    help='Directory for exported files (default: output_dir from config)'
)
@click.pass_obj
def export_transactions(cfg, db_path, output_format, output_dir):
    """Write stored transactions to a file."""
    db_path = db_path or cfg['db_path']
    if output_dir:
        cfg = dict(cfg, output_dir=output_dir)
    try:
        conn = connect(db_path)
        try:
            transactions = list_transactions(conn)
        finally:
            conn.close()
    except StorageError as exc:
        raise click.ClickException(str(exc)) from exc

    out_path = get_output(output_format, cfg).write(transactions)
    if out_path is None:
        click.echo("No transactions to export.")
        return
    click.echo(f"Exported {len(transactions)} transaction(s) to {out_path}.")
