from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer

from propmatch.adapters.config import config
from propmatch.pipelines.core import (
    clear_preferences,
    import_catalog,
    run_search,
    save_preferences,
    show_preferences,
)
from propmatch.services.matching import use_system_collation

app = typer.Typer(help="propmatch tooling (catalog import, search, preferences, API server).")
prefs_app = typer.Typer(help="Show, set or clear the saved search preferences.")
app.add_typer(prefs_app, name="prefs")


@app.callback()
def main() -> None:
    use_system_collation()


@app.command("import-catalog")
def import_catalog_cmd(
    properties: str = typer.Argument(..., help="Properties export (csv/parquet/json)"),
    configurations: Optional[str] = typer.Option(
        None, "--configurations", "-c", help="Configurations export (csv/parquet/json)"
    ),
    db_uri: Optional[str] = typer.Option(None, help="Override PROPMATCH_DB_URI"),
) -> None:
    """
    Load catalog exports into the database.
    """
    counts = import_catalog(properties, configurations, db_uri=db_uri)
    typer.echo(json.dumps(counts))


@app.command()
def search(
    sort_by: str = typer.Option(config.DEFAULT_SORT, "--sort", help="match|price-low|price-high|name"),
    limit: Optional[int] = typer.Option(None, help="Max results"),
    output: Optional[str] = typer.Option(None, help="Write results to csv/parquet"),
    db_uri: Optional[str] = typer.Option(None, help="Override PROPMATCH_DB_URI"),
) -> None:
    """
    Rank the catalog against the saved preferences.
    """
    df = run_search(
        sort_by=sort_by,
        limit=limit,
        db_uri=db_uri,
        output=Path(output) if output else None,
    )
    if df.empty:
        typer.echo("No matching properties found")
        return
    typer.echo(df[["name", "zone", "match_score", "price"]].to_string(index=False))


@prefs_app.command("show")
def prefs_show() -> None:
    typer.echo(json.dumps(show_preferences(), indent=2))


@prefs_app.command("set")
def prefs_set(
    intent: Optional[str] = typer.Option(None, help="investment|end-use"),
    property_type: Optional[str] = typer.Option(None, "--type", help="apartment|villa|plot|commercial"),
    zone: Optional[str] = typer.Option(None, help="north|south|east|west|central"),
    zone_id: Optional[str] = typer.Option(None, "--zone-id"),
    budget_min: Optional[float] = typer.Option(None, help="Budget floor (lakhs)"),
    budget_max: Optional[float] = typer.Option(None, help="Budget ceiling (lakhs)"),
    bhk: Optional[List[str]] = typer.Option(None, "--bhk", help="Preferred BHK, repeatable"),
    tag: Optional[List[str]] = typer.Option(None, "--tag", help="Preferred tag, repeatable"),
) -> None:
    """
    Update the saved preferences; unspecified fields keep their values.
    """
    values: dict = {}
    if intent is not None:
        values["intent"] = intent
    if property_type is not None:
        values["propertyType"] = property_type
    if zone is not None:
        values["zone"] = zone
    if zone_id is not None:
        values["zoneId"] = zone_id
    if budget_min is not None or budget_max is not None:
        current = show_preferences()["budgetRange"]
        values["budgetRange"] = [
            budget_min if budget_min is not None else current[0],
            budget_max if budget_max is not None else current[1],
        ]
    if bhk:
        values["bhkType"] = bhk
    if tag:
        values["tags"] = tag

    typer.echo(json.dumps(save_preferences(values), indent=2))


@prefs_app.command("clear")
def prefs_clear() -> None:
    typer.echo(json.dumps(clear_preferences(), indent=2))


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1"),
    port: int = typer.Option(8000),
    reload: bool = typer.Option(False),
) -> None:
    """
    Run the HTTP API.
    """
    import uvicorn

    uvicorn.run("propmatch.api.http:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
