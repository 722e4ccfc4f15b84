"""pkgdir CLI: build an HTML directory of Janet packages."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from pkgdir import __version__
from pkgdir.config import PkgdirConfig
from pkgdir.errors import PkgdirError

# stdout carries the generated page, so diagnostics go to stderr.
console = Console(stderr=True)

logger = logging.getLogger("pkgdir")


def _setup_logging(verbose: bool) -> None:
    """Send pkgdir log records to stderr."""
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def get_config(base_dir: Path | None = None, skip_unsupported: bool = False) -> PkgdirConfig:
    config = PkgdirConfig.from_env()
    if base_dir is not None:
        config.base_dir = base_dir
    if skip_unsupported:
        config.on_unsupported = "skip"
    config.ensure_dirs()
    return config


def _fail(message: str) -> None:
    console.print(f"[red]{message}[/]", highlight=False)
    sys.exit(1)


base_dir_option = click.option(
    "--base-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding pkgs.janet and the cache (default: $PKGDIR_HOME or cwd)",
)


@click.group()
@click.version_option(__version__, package_name="pkgdir")
@click.option("--verbose", "-v", is_flag=True, help="Log cache hits and other details")
def cli(verbose: bool) -> None:
    """pkgdir - an HTML directory of Janet packages.

    Downloads pkgs.janet, fetches every package's project.janet once into a
    local cache, and prints a directory page.
    """
    _setup_logging(verbose)


@cli.command()
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Write the page to FILE instead of stdout")
@click.option("--skip-unsupported", is_flag=True,
              help="Skip packages on unknown hosts instead of aborting")
@base_dir_option
def build(output: Path | None, skip_unsupported: bool, base_dir: Path | None) -> None:
    """Build the package directory page."""
    from pkgdir.pipeline import Pipeline

    try:
        config = get_config(base_dir, skip_unsupported)
        pipeline = Pipeline(config)
        try:
            result = pipeline.build()
        finally:
            pipeline.close()
    except (PkgdirError, OSError) as e:
        _fail(f"Error: {e}")
        return

    if output is None:
        click.echo(result.html, nl=False)
    else:
        output.write_text(result.html, encoding="utf-8")
        console.print(f"[green]Wrote {result.rendered} package(s) to {output}[/]")
    if result.skipped:
        console.print(f"[yellow]Skipped: {', '.join(result.skipped)}[/]")


@cli.command("list")
@base_dir_option
def list_(base_dir: Path | None) -> None:
    """List packages from pkgs.janet."""
    from pkgdir.fetch import HttpFetcher
    from pkgdir.listing import PackageListLoader
    from pkgdir.sources import provider_name

    try:
        config = get_config(base_dir)
        with HttpFetcher(timeout=config.timeout) as fetcher:
            loader = PackageListLoader(config.listing_path, fetcher, url=config.listing_url)
            packages = loader.load_packages()
    except (PkgdirError, OSError) as e:
        _fail(f"Error: {e}")
        return

    table = Table(title=f"{len(packages)} packages")
    table.add_column("Package", style="bold")
    table.add_column("Host")
    table.add_column("Repository")

    for ref in packages:
        host = provider_name(ref.repository_url)
        table.add_row(
            ref.name,
            host or "[red]unsupported[/]",
            ref.repository_url,
        )

    Console().print(table)


@cli.command()
@click.option("--listing", is_flag=True, help="Also delete the cached pkgs.janet")
@base_dir_option
def clean(listing: bool, base_dir: Path | None) -> None:
    """Delete cached descriptors so they are fetched again."""
    from pkgdir.cache import clear_cache

    try:
        config = get_config(base_dir)
        removed = clear_cache(config.cache_dir)
    except (PkgdirError, OSError) as e:
        _fail(f"Error: {e}")
        return
    console.print(f"[green]Removed {removed} cached descriptor(s)[/]")

    if listing and config.listing_path.exists():
        config.listing_path.unlink()
        console.print(f"[green]Removed {config.listing_path}[/]")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
