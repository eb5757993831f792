import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from concoction.config import load_config
from concoction.context import SiteModel
from concoction.errors import ConcoctionError
from concoction.loader import load_site
from concoction.pipeline import Pipeline

app = typer.Typer()
console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _summary(model: SiteModel) -> Table:
    table = Table(title="Posts")
    table.add_column("#", justify="right")
    table.add_column("Context")
    table.add_column("Date")
    if model.global_id is None:
        return table
    for i, key in enumerate(model.global_record().get("_contexts", []), start=1):
        table.add_row(str(i), key, str(model.records[key].get("date", "")))
    return table


@app.command()
def run(
    config: Path = typer.Option("concoction.json", help="Path to the site descriptor."),
    dump: Optional[Path] = typer.Option(None, help="Write the processed contexts as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Load the site contexts and run the pipeline."""
    _setup_logging(verbose)
    try:
        cfg = load_config(config)
        model = load_site(cfg)
        Pipeline(cfg, model).run()
    except ConcoctionError as exc:
        err_console.print(f"[red]{exc}")
        raise typer.Exit(code=1)

    console.print(_summary(model))
    if dump is not None:
        dump.write_text(json.dumps(model.records, indent=2, default=str), encoding="utf-8")
        console.print(f"Wrote {dump}")
    console.print("Done.")


@app.command()
def options(config: Path = typer.Option("concoction.json", help="Path to the site descriptor.")):
    """Print the path patterns assembled from the descriptor."""
    try:
        cfg = load_config(config)
    except ConcoctionError as exc:
        err_console.print(f"[red]{exc}")
        raise typer.Exit(code=1)
    console.print_json(cfg.options().model_dump_json())


if __name__ == "__main__":
    app()
