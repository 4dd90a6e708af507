"""Typer CLI entrypoint."""

from __future__ import annotations

import logging

import typer

from destctl.core.errors import DestctlError
from destctl.core.model import Destination, DestinationPlatform, DestinationType
from destctl.core.service import DestinationService

app = typer.Typer(help="Rank and select Xcode build destinations")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_service() -> DestinationService:
    service = DestinationService()
    for warning in service.refresh():
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _describe(destination: Destination, selected_id: str | None = None) -> str:
    marker = "*" if destination.id == selected_id else " "
    return f"{marker} {destination.id}  {destination.label}  [{destination.type_label}]"


@app.command("list")
def list_destinations(
    platform: list[DestinationPlatform] | None = typer.Option(
        None, "--platform", help="Only include these platforms (repeatable)"
    ),
    most_used: bool = typer.Option(False, "--most-used", help="Put frequently selected destinations first"),
) -> None:
    """List destinations in ranked order; the selected one is marked with '*'."""
    try:
        service = _build_service()
        destinations = service.list_destinations(platforms=platform, most_used=most_used)
        if not destinations:
            typer.echo("No destinations found")
            return

        selected = service.selected()
        selected_id = selected.id if selected else None
        for destination in destinations:
            typer.echo(_describe(destination, selected_id))
    except DestctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("simulators")
def list_simulators(
    sort: bool = typer.Option(False, "--sort", help="Rank simulators instead of provider order"),
) -> None:
    """List simulators known to simctl."""
    try:
        service = _build_service()
        simulators = service.list_simulators(sort=sort)
        if not simulators:
            typer.echo("No simulators found")
            return

        for simulator in simulators:
            state = "booted" if simulator.is_booted else "shutdown"
            typer.echo(f"{simulator.id}  {simulator.label}  {state}")
    except DestctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("find")
def find_destination(
    destination_id: str,
    destination_type: DestinationType | None = typer.Option(None, "--type", help="Only search this destination type"),
) -> None:
    """Resolve a destination id and print its details."""
    try:
        service = _build_service()
        destination = service.find(destination_id, destination_type)
        if destination is None:
            typer.echo(f"Destination '{destination_id}' not found")
            raise typer.Exit(code=1)
        typer.echo(destination.label)
        typer.echo(f"  {destination.quick_pick_details}")
    except DestctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("select")
def select_destination(
    destination_id: str,
    destination_type: DestinationType | None = typer.Option(None, "--type", help="Only search this destination type"),
) -> None:
    """Make a destination the workspace destination and count the selection."""
    try:
        service = _build_service()
        selected = service.select(destination_id, destination_type)
        count = service.usage_count(selected.id)
        typer.echo(f"Selected {selected.name} ({selected.id}), used {count} time(s)")
    except DestctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("clear")
def clear_selection() -> None:
    """Forget the workspace destination. Usage counts are kept."""
    try:
        service = DestinationService()
        service.clear_selection()
        typer.echo("Cleared workspace destination")
    except DestctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("selected")
def show_selected() -> None:
    """Show the workspace destination and whether it still exists."""
    try:
        service = _build_service()
        selected = service.selected()
        if selected is None:
            typer.echo("No workspace destination selected")
            return

        destination = service.resolve_selected()
        if destination is None:
            typer.echo(f"{selected.name} ({selected.id}) is no longer available")
            return
        typer.echo(_describe(destination, selected.id))
    except DestctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("most-used")
def most_used() -> None:
    """List previously selected destinations, most used first."""
    try:
        service = _build_service()
        entries = service.most_used()
        if not entries:
            typer.echo("No usage recorded yet")
            return

        for destination, count in entries:
            typer.echo(f"{count:>4}  {destination.id}  {destination.label}")
    except DestctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
