"""
Synchronizes the README of a Rust crate with the inner documentation of its
entry point. Meant to be run as the Cargo subcommand `cargo sync-readme`.
"""

from __future__ import annotations

from pathlib import Path

import click

from .config import ConfigError, build_config
from .exceptions import ManifestError, MarkerError
from .extractor import extract_inner_doc
from .filesystem import get_max_file_size, read_text, write_readme
from .manifest import Manifest
from .transform import transform_readme

__all__ = ["cli"]

# Exit code used when the README was processed but warnings were emitted.
WARNING_EXIT_CODE = 2


def _warn(message: str) -> None:
    click.echo(f"warning: {message}", err=True)


@click.group()
@click.version_option(package_name="cargo-sync-readme")
def cli():
    """Cargo subcommand entry point (`cargo sync-readme`)."""


@cli.command("sync-readme")
@click.option(
    "-z",
    "--show-hidden-doc",
    is_flag=True,
    help="Show Rust hidden documentation lines in the generated README.",
)
@click.option(
    "-f",
    "--prefer-doc-from",
    type=click.Choice(["bin", "lib"]),
    help="Read the documentation from the binary (`bin`) or the library (`lib`) entry point.",
)
@click.option(
    "--crlf",
    is_flag=True,
    help="Generate documentation with CRLF line endings. Already present newlines are kept.",
)
@click.option("-c", "--check", is_flag=True, help="Check whether the README is synchronized.")
@click.pass_context
def sync_readme(
    ctx: click.Context,
    show_hidden_doc: bool = False,
    prefer_doc_from: str | None = None,
    crlf: bool = False,
    check: bool = False,
):
    """
    Generate a Markdown section in your README based on your Rust documentation.

    Args:
        ctx: Click context, used to report the warning exit code.
        show_hidden_doc: Keep hidden lines of code examples.
        prefer_doc_from: Documented target, `bin` or `lib`.
        crlf: Use CRLF line endings in the synchronized region.
        check: Only verify that the README is up to date.

    Raises:
        click.BadParameter: If the `[package.metadata.sync-readme]` settings
            are invalid.
        click.ClickException: If the manifest, entry point or README cannot be
            used, the markers are missing or ambiguous, or, with `--check`, the
            README is not synchronized or there is no documentation to compare.

    Examples:
        cargo sync-readme --prefer-doc-from lib --check
    """
    try:
        manifest = Manifest.find(Path.cwd())
        config = build_config(
            manifest,
            # Flags can only switch settings on; unset flags keep the manifest values.
            show_hidden_doc=show_hidden_doc or None,
            crlf=crlf or None,
            prefer_doc_from=prefer_doc_from,
        )
    except ManifestError as error:
        raise click.ClickException(str(error)) from error
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        crate_name = manifest.crate_name()
        entry_point = manifest.entry_point(config.preferred_target)
        readme_path = manifest.readme()
    except ManifestError as error:
        raise click.ClickException(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        entry_source, _ = read_text(entry_point, max_file_size)
        readme, readme_stat = read_text(readme_path, max_file_size)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    doc = extract_inner_doc(entry_source, show_hidden_doc=config.show_hidden_doc, crlf=config.crlf)
    if not doc:
        if check:
            raise click.ClickException(
                f"no inner documentation found in {entry_point}; cannot check the README"
            )
        _warn(f"no inner documentation found in {entry_point}; nothing to synchronize")
        ctx.exit(WARNING_EXIT_CODE)

    try:
        result = transform_readme(
            readme, doc, crate_name, entry_point=entry_point, crlf=config.crlf
        )
    except MarkerError as error:
        raise click.ClickException(f"{readme_path}: {error}") from error

    for warning in result.warnings:
        _warn(warning)

    if check:
        if result.content != readme:
            raise click.ClickException("README is not synchronized!")
        return

    if result.content != readme:
        try:
            write_readme(readme_path, result.content, readme_stat, warn=_warn)
        except IOError as error:
            raise click.ClickException(str(error)) from error

    if result.warnings:
        ctx.exit(WARNING_EXIT_CODE)


if __name__ == "__main__":
    cli()
