"""Command-line interface for ucisession."""

import typer
from rich.console import Console

from ucisession import __version__
from ucisession.engine.session import EngineSession
from ucisession.errors import UCIEngineError
from ucisession.utils.config import EngineConfig, load_engine_config
from ucisession.utils.logging import setup_logging

app = typer.Typer(
    name="ucisession",
    help="Drive a UCI chess engine from the command line",
    add_completion=False,
)
console = Console()


@app.command()
def version() -> None:
    """Print version information."""
    console.print(f"[bold blue]ucisession[/bold blue] v{__version__}")


@app.command()
def bestmove(
    engine: str = typer.Argument(None, help="Engine executable (overrides the config file)"),
    position: str = typer.Option("startpos", "--position", "-p", help="Arguments for 'position'"),
    go: str = typer.Option("depth 10", "--go", "-g", help="Arguments for 'go'"),
    config: str = typer.Option(None, "--config", "-c", help="YAML file with an 'engine' section"),
    timeout: float = typer.Option(None, "--timeout", "-t", help="Seconds to wait per engine line"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every line sent and received"),
) -> None:
    """Search a position and print the engine's best move."""
    setup_logging("WARNING", trace_traffic=verbose)

    if config:
        engine_config = load_engine_config(config)
        if engine:
            engine_config.command = engine
    elif engine:
        engine_config = EngineConfig(command=engine)
    else:
        console.print("[red]Give an engine executable or --config[/red]")
        raise typer.Exit(code=2)

    if timeout is not None:
        engine_config.timeout = timeout

    session = None
    try:
        session = EngineSession.from_config(engine_config)
        session = session.set_position(position)
        session, best = session.go(go)
        session.quit()
    except UCIEngineError as exc:
        console.print(f"[bold red]Engine error:[/bold red] {exc}")
        owner = exc.session or session
        if owner is not None and not owner.is_consumed:
            owner.kill()
        raise typer.Exit(code=1) from exc

    console.print(f"[bold green]bestmove[/bold green] {best.best_move}")
    if best.ponder is not None:
        console.print(f"[cyan]ponder[/cyan] {best.ponder}")


if __name__ == "__main__":
    app()
