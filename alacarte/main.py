"""
a-la-carte — CLI entrypoint.

Usage:
    a-la-carte --help
    a-la-carte provision --only bat,fd --dry-run
    a-la-carte plan --group dev --json
    a-la-carte installed
"""

from __future__ import annotations

import json
import logging
import os
import queue
import sys
import threading
from pathlib import Path

import click

from alacarte import __version__
from alacarte.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)

logger = logging.getLogger(__name__)

_EVENT_COLORS = {
    "section": "cyan",
    "info": None,
    "output": "bright_black",
    "success": "green",
    "error": "red",
}


def _split(value: str | None) -> list[str]:
    """Parse a comma-separated option value."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@click.group()
@click.version_option(version=__version__, prog_name="a-la-carte")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to a-la-carte.yml (default: $A_LA_CARTE_CONFIG or XDG config dir).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """a-la-carte — install the software you pick, with whatever package manager fits."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
    )

    from alacarte.core.config.loader import ConfigError, load_config

    try:
        config = load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)

    if config.system.debug_mode and not (debug or verbose or quiet):
        setup_logging(
            level="DEBUG",
            log_file=os.environ.get(ENV_LOG_FILE),
            log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
        )
    ctx.obj["config"] = config


# ── Helpers ─────────────────────────────────────────────────────


def _load_manifest(ctx: click.Context, manifest_path: str | None):
    from alacarte.core.config.manifest_loader import ManifestError, load_manifest

    config = ctx.obj["config"]
    path = Path(manifest_path) if manifest_path else config.resolve_manifest_path()
    try:
        return load_manifest(path)
    except ManifestError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(2)


def _base_runner(ctx: click.Context):
    """The runner that talks to the OS (injectable through ``ctx.obj``)."""
    if ctx.obj.get("runner") is not None:
        return ctx.obj["runner"]

    from alacarte.adapters.shell.command import SubprocessRunner
    from alacarte.core.services.provision.execution.script_template import (
        ChezmoiTemplateRenderer,
        PassthroughRenderer,
    )

    config = ctx.obj["config"]
    renderer = (
        ChezmoiTemplateRenderer() if config.provision.template_scripts else PassthroughRenderer()
    )
    return SubprocessRunner(renderer=renderer)


def _probe(ctx: click.Context):
    if ctx.obj.get("probe") is not None:
        return ctx.obj["probe"]

    from alacarte.core.services.provision.detection.system_probe import HostSystemProbe

    return HostSystemProbe()


def _print_events(events: queue.Queue, quiet: bool) -> None:
    """Drain runner events until the ``None`` sentinel arrives.

    The queue is bounded, so draining continues after the terminal
    stops accepting output (closed pipe, unencodable text).
    """
    printing = True
    while True:
        event = events.get()
        if event is None:
            return
        if not printing:
            continue
        try:
            _print_event(event, quiet)
        except (OSError, UnicodeError) as e:
            printing = False
            logger.debug("Progress output stopped: %s", e)


def _print_event(event, quiet: bool) -> None:
    if event.level == "section":
        if not quiet:
            click.secho(f"\n── {event.text} ──", fg="cyan", bold=True)
        return
    if quiet and event.level != "error":
        return
    click.secho(f"   {event.text}", fg=_EVENT_COLORS.get(event.level))


def _installer_order(ctx: click.Context, option: str | None) -> list[str]:
    if option:
        return _split(option)
    return list(ctx.obj["config"].provision.installer_order)


# ── Commands ────────────────────────────────────────────────────


@cli.command()
@click.option("--manifest", "manifest_path", default=None, help="Path to the software manifest.")
@click.option("--all", "-a", "all_keys", is_flag=True, help="Select every manifest key.")
@click.option("--lazy", "-l", is_flag=True, help="Only install entries marked lazy.")
@click.option("--dry-run", is_flag=True, help="Print the commands instead of running them.")
@click.option("--group", "groups", default=None, help="Comma-separated group names.")
@click.option("--only", default=None, help="Comma-separated manifest keys.")
@click.option("--log-file", default=None, help="Append attempted commands and errors here.")
@click.option("--installer-order", default=None, help="Comma-separated installer preference.")
@click.option("--no-post-install", is_flag=True, help="Skip flatpak/cask wrapper generation.")
@click.pass_context
def provision(
    ctx: click.Context,
    manifest_path: str | None,
    all_keys: bool,
    lazy: bool,
    dry_run: bool,
    groups: str | None,
    only: str | None,
    log_file: str | None,
    installer_order: str | None,
    no_post_install: bool,
) -> None:
    """Install the selected software."""
    from alacarte.adapters.dry_run import DryRunRunner
    from alacarte.adapters.shell.streaming import EventStreamRunner
    from alacarte.core.use_cases.provision import build_provisioner, run_provision, select_keys

    config = ctx.obj["config"]
    quiet = ctx.obj.get("quiet", False)
    manifest = _load_manifest(ctx, manifest_path)
    keys = select_keys(
        manifest,
        only=_split(only),
        groups=_split(groups),
        all_keys=all_keys,
        preload_keys=config.software.preload_keys,
    )

    base = _base_runner(ctx)
    inner = DryRunRunner(query_runner=base) if dry_run else base
    stream = EventStreamRunner(inner)
    if hasattr(base, "on_output"):
        base.on_output = lambda line: stream.emit("output", line)

    printer = threading.Thread(target=_print_events, args=(stream.events, quiet), daemon=True)
    printer.start()
    try:
        provisioner = build_provisioner(
            manifest,
            stream,
            _probe(ctx),
            installer_order=_installer_order(ctx, installer_order),
            lazy_only=lazy or config.provision.lazy_only,
            dry_run=dry_run,
            log_file=log_file or config.provision.log_file,
            home=ctx.obj.get("home"),
        )
        result = run_provision(provisioner, keys, post_install=not no_post_install)
    finally:
        stream.close()
        printer.join()

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    if dry_run:
        click.secho("\nDry run — commands that would run:", bold=True)
        for line in result.dry_run_commands:
            click.echo(f"   {line}")

    for path in result.wrappers:
        click.echo(f"   wrapper: {path}")

    if result.errors:
        click.secho(f"\n❌ {len(result.errors)} install step(s) failed:", fg="red", bold=True)
        for i, err in enumerate(result.errors, start=1):
            click.echo(f"   [{i}] {err}")
        sys.exit(1)

    if not quiet:
        click.secho(f"\n✅ {len(result.plan)} install step(s) complete", fg="green")


@cli.command()
@click.option("--manifest", "manifest_path", default=None, help="Path to the software manifest.")
@click.option("--all", "-a", "all_keys", is_flag=True, help="Select every manifest key.")
@click.option("--lazy", "-l", is_flag=True, help="Only plan entries marked lazy.")
@click.option("--group", "groups", default=None, help="Comma-separated group names.")
@click.option("--only", default=None, help="Comma-separated manifest keys.")
@click.option("--installer-order", default=None, help="Comma-separated installer preference.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(
    ctx: click.Context,
    manifest_path: str | None,
    all_keys: bool,
    lazy: bool,
    groups: str | None,
    only: str | None,
    installer_order: str | None,
    as_json: bool,
) -> None:
    """Show the install plan without running it."""
    from alacarte.adapters.dry_run import DryRunRunner
    from alacarte.core.use_cases.provision import build_provisioner, plan_only, select_keys

    config = ctx.obj["config"]
    manifest = _load_manifest(ctx, manifest_path)
    keys = select_keys(
        manifest,
        only=_split(only),
        groups=_split(groups),
        all_keys=all_keys,
        preload_keys=config.software.preload_keys,
    )
    provisioner = build_provisioner(
        manifest,
        DryRunRunner(query_runner=_base_runner(ctx)),
        _probe(ctx),
        installer_order=_installer_order(ctx, installer_order),
        lazy_only=lazy or config.provision.lazy_only,
        dry_run=True,
    )
    result = plan_only(provisioner, keys)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    if not result.plan:
        click.echo("Nothing to install.")
        return
    for instruction in result.plan:
        click.echo(str(instruction))


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def installed(ctx: click.Context, as_json: bool) -> None:
    """List installed package identifiers detected on this host."""
    from alacarte.core.services.provision.detection.installed import get_installed_packages

    found = sorted(get_installed_packages(_base_runner(ctx)))
    if as_json:
        click.echo(json.dumps(found, indent=2))
        return
    for name in found:
        click.echo(name)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
