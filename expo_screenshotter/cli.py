"""Command-line interface: ``init``, ``capture`` and ``routes``."""

from __future__ import annotations

import asyncio
import shutil
import subprocess
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

import structlog
import typer
from playwright.async_api import Error as PlaywrightError

from expo_screenshotter.capture.orchestrator import take_screenshots
from expo_screenshotter.config.logging import setup_logging
from expo_screenshotter.config.settings import get_settings
from expo_screenshotter.exceptions import ConfigError, ScreenshotterError
from expo_screenshotter.models.config import (
    ScreenshotConfig,
    default_config,
    load_config,
    save_config,
)
from expo_screenshotter.routes.detector import ExpoRouterRouteProvider, RouteProvider

logger = structlog.get_logger(__name__)

EXPO_PROJECT_MARKERS = ("app.json", "app.config.js")
WEB_DEPENDENCY_INSTALL = ["npm", "install", "react-native-web"]

CAPTURE_TIPS = (
    "Tips:",
    "1. Make sure your Expo app is running with: expo start --web",
    "2. Ensure you have react-native-web installed: npm install react-native-web",
    "3. Check that the expoUrl in your config matches your Expo web server URL",
    "4. Install the browser if it is missing: playwright install chromium",
)


def _raise_exit(code: int) -> None:
    raise typer.Exit(code)


def _run_command(args: list[str]) -> int:
    executable = shutil.which(args[0])
    if executable is None:
        msg = f"Command not found: {args[0]}"
        raise FileNotFoundError(msg)
    return subprocess.run([executable, *args[1:]], check=False).returncode  # nosec B603


@dataclass
class ExecutionContext:
    """Console handles and process behaviour for one CLI invocation."""

    stdin: TextIO = field(default_factory=lambda: sys.stdin)
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    cwd: Path = field(default_factory=Path.cwd)
    exit: Callable[[int], None] = _raise_exit
    run_command: Callable[[list[str]], int] = _run_command

    def echo(self, message: str = "", fg: str | None = None) -> None:
        typer.echo(typer.style(message, fg=fg) if fg else message, file=self.stdout)

    def prompt_yes_no(self, question: str) -> bool:
        """Ask a Y/n question; an empty answer means yes, end of input means no."""
        self.stdout.write(f"{question} (Y/n): ")
        self.stdout.flush()
        answer = self.stdin.readline()
        if not answer:
            return False
        return answer.strip().lower() in {"y", "yes", ""}

    def resolve(self, path: Path | str) -> Path:
        path = Path(path).expanduser()
        return path if path.is_absolute() else self.cwd / path


def is_expo_project(directory: Path) -> bool:
    return any((directory / marker).exists() for marker in EXPO_PROJECT_MARKERS)


def init_project(ctx: ExecutionContext) -> int:
    """Write a starter config and offer to install web support."""
    config_path = ctx.resolve(get_settings().config_filename)
    if config_path.exists():
        ctx.echo(f"{config_path.name} already exists!", fg="yellow")
        return 0

    try:
        save_config(default_config(), config_path)
    except OSError as e:
        logger.error("config_write_failed", path=str(config_path), error=str(e))
        ctx.echo(f"Error initializing expo-screenshotter: {e}", fg="red")
        return 1
    ctx.echo(f"Created {config_path.name}", fg="green")
    ctx.echo("Edit this file to configure your screenshot settings", fg="blue")

    if not is_expo_project(ctx.cwd):
        return 0

    ctx.echo()
    ctx.echo("IMPORTANT: This tool requires web support for your Expo app.", fg="yellow")
    ctx.echo("You will need react-native-web installed to capture screenshots.", fg="yellow")

    if ctx.prompt_yes_no("Would you like to install the required web dependencies now?"):
        ctx.echo("Installing react-native-web...", fg="blue")
        try:
            code = ctx.run_command(WEB_DEPENDENCY_INSTALL)
        except OSError as e:
            logger.warning("dependency_install_failed", error=str(e))
            code = -1
        if code == 0:
            ctx.echo("Successfully installed web dependencies!", fg="green")
            ctx.echo("You can now run your Expo app with web support using: expo start --web")
        else:
            ctx.echo("Failed to install dependencies.", fg="red")
            ctx.echo("Please install manually with: npm install react-native-web", fg="yellow")
    else:
        ctx.echo("Remember to install web dependencies before capturing screenshots:", fg="yellow")
        ctx.echo("  npm install react-native-web")

    ctx.echo()
    ctx.echo("To capture screenshots:", fg="blue")
    ctx.echo("1. Start your Expo app with: expo start --web")
    ctx.echo("2. Run: expo-screenshotter capture")
    return 0


def _rebase_output_dir(ctx: ExecutionContext, config: ScreenshotConfig) -> ScreenshotConfig:
    output_dir = Path(config.output_dir)
    if output_dir.is_absolute():
        return config
    return config.model_copy(update={"output_dir": str(ctx.resolve(output_dir))})


def run_capture(ctx: ExecutionContext, config_file: str) -> int:
    """Load the config and capture every view at every size."""
    config_path = ctx.resolve(config_file)
    if not config_path.exists():
        ctx.echo(f"Configuration file not found: {config_file}", fg="red")
        ctx.echo('Run "expo-screenshotter init" to create a configuration file', fg="yellow")
        return 0

    try:
        config = _rebase_output_dir(ctx, load_config(config_path))
    except ConfigError as e:
        ctx.echo(f"Error: {e}", fg="red")
        return 1

    ctx.echo("Starting screenshot capture...", fg="blue")
    try:
        result = asyncio.run(take_screenshots(config))
    except (ScreenshotterError, PlaywrightError) as e:
        logger.error("capture_failed", error=str(e))
        ctx.echo(f"Error capturing screenshots: {e}", fg="red")
        ctx.echo()
        for line in CAPTURE_TIPS:
            ctx.echo(line, fg="yellow")
        return 1

    ctx.echo(f"Captured {len(result.records)} screenshots into {config.output_dir}", fg="green")
    return 0


def list_routes(
    ctx: ExecutionContext,
    config_file: str,
    provider: RouteProvider,
    write: bool = False,
) -> int:
    """Print discovered routes and optionally merge them into the config's views."""
    views = provider.detect()
    if not views:
        ctx.echo("No routes found", fg="yellow")
        return 0

    for view in views:
        ctx.echo(f"{view.path}\t{view.name}")

    if not write:
        return 0

    config_path = ctx.resolve(config_file)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        ctx.echo(f"Error: {e}", fg="red")
        return 1

    # Keep configured views (and their interactions) for paths that still exist
    existing = {view.path: view for view in config.views}
    merged = [existing.get(view.path, view) for view in views]
    save_config(config.model_copy(update={"views": merged}), config_path)
    ctx.echo(f"Wrote {len(merged)} views to {config_path.name}", fg="green")
    return 0


app = typer.Typer(
    name="expo-screenshotter",
    help="Take screenshots of Expo apps at different screen sizes.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    settings = get_settings()
    setup_logging(
        log_level="DEBUG" if verbose else settings.log_level,
        json_output=settings.json_logs,
    )


@app.command()
def init() -> None:
    """Initialize a new expo-screenshotter.json configuration file."""
    ctx = ExecutionContext()
    ctx.exit(init_project(ctx))


@app.command()
def capture(
    config: str | None = typer.Option(
        None, "--config", "-c", help="Path to configuration file", show_default=False
    ),
) -> None:
    """Capture screenshots based on the configuration."""
    ctx = ExecutionContext()
    ctx.exit(run_capture(ctx, config or get_settings().config_filename))


@app.command()
def routes(
    app_dir: str = typer.Option("app", "--app-dir", help="Expo Router app directory"),
    config: str | None = typer.Option(
        None, "--config", "-c", help="Path to configuration file", show_default=False
    ),
    write: bool = typer.Option(False, "--write", help="Merge routes into the config's views"),
) -> None:
    """List routes discovered in an Expo Router project."""
    ctx = ExecutionContext()
    provider = ExpoRouterRouteProvider(ctx.resolve(app_dir))
    ctx.exit(list_routes(ctx, config or get_settings().config_filename, provider, write=write))
