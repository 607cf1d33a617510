# src/gameblocker/cli.py
import logging
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from gameblocker import exporter, store
from gameblocker.blocker.config import EXPORTS_DIR
from gameblocker.blocker.export_sink import ExportSink
from gameblocker.db.session import SessionLocal, init_db
from gameblocker.errors import BlocklistError

cli = typer.Typer(help="Maintain the game blocklist and export block/unblock scripts.")


@cli.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level.")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
def start_api(host: str = "127.0.0.1", port: int = 8000):
    """Serve the REST API."""
    uvicorn.run("gameblocker.api.server:app", host=host, port=port, reload=False)


@cli.command()
def export(exports_dir: Path = typer.Option(EXPORTS_DIR, help="Where the .bat files are written.")):
    """Export a new block/unblock pair and bump the patch version."""
    init_db()
    db = SessionLocal()
    try:
        result = exporter.export_scripts(db, ExportSink(exports_dir))
    except BlocklistError as e:
        typer.echo(f"Export failed: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        db.close()
    typer.echo(f"Exported {result.version}: {result.block_file}, {result.unblock_file}")
    typer.echo(f"Next version: {result.next_version}")


@cli.command()
def preview(which: str = typer.Argument("block", help="block or unblock"), output: Optional[Path] = None):
    """Print (or write) the script the next export would produce."""
    if which not in ("block", "unblock"):
        raise typer.BadParameter("expected 'block' or 'unblock'")
    init_db()
    db = SessionLocal()
    try:
        pair = exporter.preview_scripts(db)
    finally:
        db.close()

    text = pair.block_text if which == "block" else pair.unblock_text
    if output:
        output.write_text(text, encoding="utf-8", newline="")
        typer.echo(f"Wrote {output}")
    else:
        typer.echo(text.replace("\r\n", "\n"), nl=False)


@cli.command()
def history(limit: int = 10):
    """List recent exports, newest first."""
    init_db()
    db = SessionLocal()
    try:
        typer.echo(f"Current version: {store.current_version(db)}")
        for record in store.list_history(db, limit=limit):
            typer.echo(f"{record.version}  {record.created_at:%Y-%m-%d %H:%M}  {record.block_file}  {record.unblock_file}")
    finally:
        db.close()


if __name__ == "__main__":
    cli()

# to run the api use the command:
# gameblocker start-api
