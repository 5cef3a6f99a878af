"""Main CLI application for webtoapk."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from webtoapk import __version__
from webtoapk.build.orchestrator import create_build_orchestrator
from webtoapk.cli.error_handling import handle_errors
from webtoapk.config.loader import load_app_config
from webtoapk.config.settings import WebToAPKSettings
from webtoapk.core.logging import setup_logging
from webtoapk.models.keystore import KeystoreConfig
from webtoapk.models.options import BuildOptions


__all__ = ["app", "main"]

logger = logging.getLogger(__name__)

console = Console()


class AppContext:
    """Application context for storing shared state."""

    def __init__(self, verbose: int = 0, log_file: str | None = None) -> None:
        self.verbose = verbose
        self.log_file = log_file
        self.settings = WebToAPKSettings()


app = typer.Typer(
    name="webtoapk",
    help=f"""webtoapk v{__version__}

Package a web application as an Android APK using Capacitor and Gradle.

Common workflows:
  • Create project:  webtoapk init app.json ./my-app
  • Build debug APK: webtoapk build ./my-app --output dist/
  • Sign an APK:     webtoapk sign app-release.apk --keystore release.jks --alias key0""",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity (-v=INFO, -vv=DEBUG)",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging (equivalent to -vv)"),
    ] = False,
    log_file: Annotated[
        str | None, typer.Option("--log-file", help="Also write JSON logs to a file")
    ] = None,
    json_logs: Annotated[
        bool, typer.Option("--json-logs", help="Render console logs as JSON")
    ] = False,
    version: Annotated[
        bool, typer.Option("--version", help="Show version and exit")
    ] = False,
) -> None:
    """webtoapk command line interface."""
    if version:
        print(f"webtoapk v{__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()

    ctx.obj = AppContext(verbose=verbose, log_file=log_file)

    log_level = "WARNING"
    if debug or verbose >= 2:
        log_level = "DEBUG"
    elif verbose == 1:
        log_level = "INFO"

    setup_logging(json_logs=json_logs, log_level_name=log_level, log_file=log_file)


def _settings(ctx: typer.Context) -> WebToAPKSettings:
    if isinstance(ctx.obj, AppContext):
        return ctx.obj.settings
    return WebToAPKSettings()


def _keystore_from_options(
    keystore: Path | None,
    alias: str | None,
    store_password: str | None,
    key_password: str | None,
) -> KeystoreConfig | None:
    if keystore is None:
        return None
    return KeystoreConfig(
        path=str(keystore),
        password=store_password or "",
        alias=alias or "",
        alias_password=key_password or store_password or "",
    )


KeystoreOption = Annotated[
    Path | None,
    typer.Option("--keystore", help="Keystore file (debug keystore when omitted)"),
]
AliasOption = Annotated[
    str | None,
    typer.Option("--alias", envvar="WEBTOAPK_KEY_ALIAS", help="Key alias"),
]
StorePasswordOption = Annotated[
    str | None,
    typer.Option(
        "--store-password",
        envvar="WEBTOAPK_KEYSTORE_PASSWORD",
        help="Keystore password",
        show_default=False,
    ),
]
KeyPasswordOption = Annotated[
    str | None,
    typer.Option(
        "--key-password",
        envvar="WEBTOAPK_KEY_PASSWORD",
        help="Key password (defaults to the keystore password)",
        show_default=False,
    ),
]


@app.command("init")
@handle_errors
def init_command(
    ctx: typer.Context,
    config_file: Annotated[
        Path, typer.Argument(help="Application config (.json, .yaml or .yml)")
    ],
    project_dir: Annotated[Path, typer.Argument(help="Directory of the new project")],
    plugin: Annotated[
        list[str] | None,
        typer.Option("--plugin", "-p", help="Additional npm package to install"),
    ] = None,
) -> None:
    """Create a Capacitor Android project from a web application."""
    config = load_app_config(config_file)
    orchestrator = create_build_orchestrator(_settings(ctx))
    asyncio.run(
        orchestrator.initialize_project(config, project_dir, plugins=plugin or [])
    )
    console.print(f"[green]✓[/green] Project initialized in {project_dir}")


@app.command("build")
@handle_errors
def build_command(
    ctx: typer.Context,
    project_dir: Annotated[Path, typer.Argument(help="Initialized project directory")],
    release: Annotated[
        bool, typer.Option("--release", help="Build the release variant")
    ] = False,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Copy the APK here")
    ] = None,
    minify: Annotated[
        bool, typer.Option("--minify", help="Enable minification")
    ] = False,
    clean: Annotated[
        bool, typer.Option("--clean", help="Run the Gradle clean task first")
    ] = False,
    sign: Annotated[bool, typer.Option("--sign", help="Sign the built APK")] = False,
    keystore: KeystoreOption = None,
    alias: AliasOption = None,
    store_password: StorePasswordOption = None,
    key_password: KeyPasswordOption = None,
) -> None:
    """Build an APK from an initialized project."""
    options = BuildOptions(
        release=release, output_dir=output, minify_web=minify, clean=clean
    )
    orchestrator = create_build_orchestrator(_settings(ctx))

    async def run() -> tuple[Path, Path | None]:
        apk_path = await orchestrator.build_apk(project_dir, options)
        if not sign:
            return apk_path, None
        keystore_config = _keystore_from_options(
            keystore, alias, store_password, key_password
        )
        return apk_path, await orchestrator.sign_apk(apk_path, keystore_config)

    apk_path, signed_path = asyncio.run(run())
    console.print(f"[green]✓[/green] APK built: {apk_path}")
    if signed_path is not None:
        console.print(f"[green]✓[/green] Signed APK: {signed_path}")


@app.command("sign")
@handle_errors
def sign_command(
    ctx: typer.Context,
    apk: Annotated[Path, typer.Argument(help="APK to sign")],
    keystore: KeystoreOption = None,
    alias: AliasOption = None,
    store_password: StorePasswordOption = None,
    key_password: KeyPasswordOption = None,
) -> None:
    """Sign an APK and verify the signature."""
    orchestrator = create_build_orchestrator(_settings(ctx))
    keystore_config = _keystore_from_options(
        keystore, alias, store_password, key_password
    )
    signed_path = asyncio.run(orchestrator.sign_apk(apk, keystore_config))
    console.print(f"[green]✓[/green] Signed APK: {signed_path}")


def main() -> int:
    """Main CLI entry point."""
    try:
        app()
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
