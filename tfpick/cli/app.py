from __future__ import annotations

from pathlib import Path

import typer

from tfpick import __version__
from tfpick.cli.context import build_context
from tfpick.cli.selector import version_selector
from tfpick.core.errors import ErrorCode
from tfpick.core.result import Err
from tfpick.output.console import RichConsole
from tfpick.output.errors import error_exit_code, print_error
from tfpick.releases.manifest import read_required_version
from tfpick.services.install import InstallRequest, InstallService


app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
    help="Pick a Terraform version, then download and install it.",
)


@app.command()
def install(
    list_all: bool = typer.Option(
        False,
        "-l",
        "--list-all",
        help="Include pre-release versions.",
    ),
    version: str | None = typer.Option(
        None,
        "-i",
        "--install",
        envvar="TF_VERSION",
        help="Install this version, skipping constraint lookup and the prompt.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        envvar="TFPICK_CONFIG",
        help="Config file (default: ~/.config/tfpick/config.toml).",
    ),
    show_version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Resolve, fetch and install a release.

    Resolution order: --install / TF_VERSION, then the module's
    required_version, then an interactive choice.
    """
    if show_version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    console = RichConsole()
    ctx_result = build_context(config, console)
    if isinstance(ctx_result, Err):
        print_error(ctx_result.error, console)
        raise typer.Exit(code=error_exit_code(ctx_result.error))
    ctx = ctx_result.value

    service = InstallService(
        config=ctx.config,
        platform=ctx.platform,
        target=ctx.target,
        cache_dir=ctx.cache_dir,
        http=ctx.http,
        console=ctx.console,
        select=version_selector(ctx.config.release.tool),
        read_constraint=lambda: read_required_version(Path.cwd()),
    )
    result = service.run(InstallRequest(explicit_version=version, include_prerelease=list_all))
    if isinstance(result, Err):
        print_error(result.error, ctx.console)
        raise typer.Exit(code=error_exit_code(result.error))

    report = result.value
    ctx.console.success(
        f"{ctx.config.release.tool} {report.version.version} installed to {report.binary.path}"
    )


def main() -> None:
    app()
