"""
Command-line interface for the Regulatory Monitor.

Provides commands for fetching updates, generating the risk analysis and
serving the dashboard.
"""

import json
import logging

import click
from dotenv import load_dotenv

# Load environment variables from .env file (if it exists)
load_dotenv()

from . import __version__
from .config import config
from .exceptions import RegMonitorError
from .formatters import format_analysis, format_updates
from .intelligence.analyzer import AnalysisGenerator
from .intelligence.fetcher import FetchResult, UpdateFetcher

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger(__name__)


def setup_file_logging() -> None:
    """Set up file logging if enabled."""
    if config.get("logging.file_enabled", False):
        log_file = config.logs_dir / "regmonitor.log"
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(config.get("logging.format")))
        logging.getLogger().addHandler(file_handler)


@click.group()
@click.version_option(version=__version__, prog_name="regmonitor")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def cli(verbose: bool) -> None:
    """Regulatory Monitor - Irish insurance & pensions regulatory intelligence."""
    logging.getLogger().setLevel(logging.DEBUG if verbose else config.get("logging.level", "INFO"))
    setup_file_logging()


def _fetch_or_exit() -> FetchResult:
    try:
        return UpdateFetcher().fetch()
    except RegMonitorError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1) from e


def _echo_log(result: FetchResult) -> None:
    if result.log:
        colour = "yellow" if result.error or result.data_version != "live" else "green"
        click.echo(click.style(result.log, fg=colour), err=True)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output JSON instead of text")
def fetch(as_json: bool) -> None:
    """Fetch recent CBI, EIOPA and Pensions Authority updates."""
    result = _fetch_or_exit()
    _echo_log(result)

    if as_json:
        click.echo(json.dumps([u.to_dict() for u in result.updates], indent=2))
        return
    click.echo(format_updates(result.updates))


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output JSON instead of text")
def analyze(as_json: bool) -> None:
    """Fetch updates and generate the aggregated risk analysis."""
    result = _fetch_or_exit()
    _echo_log(result)

    if not result.updates:
        click.echo("No updates to analyze.")
        return

    analysis = AnalysisGenerator().analyze(result.updates)
    if analysis is None:
        click.echo(click.style("No analysis available.", fg="yellow"))
        return

    if as_json:
        click.echo(json.dumps(analysis.to_dict(), indent=2))
        return
    click.echo(format_analysis(analysis))


@cli.command(name="config")
def show_config() -> None:
    """Show the effective configuration."""
    click.echo(f"Base directory:   {config.base_dir}")
    click.echo(f"Mode:             {'live' if config.api_key else 'mock (GEMINI_API_KEY not set)'}")
    click.echo(f"Strict:           {config.strict}")
    click.echo(f"Sources:          {', '.join(config.sources)}")
    click.echo(f"Fetch model:      {config.get('gemini.fetch_model')}")
    click.echo(f"Analysis model:   {config.get('gemini.analysis_model')}")
    click.echo(f"Window (days):    {config.get('intelligence.window_days')}")
    click.echo(f"Auto-refresh:     {config.get('scheduler.enabled')}")


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind")
@click.option("--port", default=8000, type=int, help="Port to bind")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def serve(host: str, port: int, reload: bool) -> None:
    """Start the dashboard web server."""
    try:
        import uvicorn
    except ImportError as err:
        click.echo(click.style("uvicorn is not installed. Run: pip install -e .", fg="red"))
        raise SystemExit(1) from err

    click.echo(click.style(f"Starting dashboard at http://{host}:{port}", fg="green"))
    uvicorn.run("regmonitor.web.main:app", host=host, port=port, reload=reload)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
