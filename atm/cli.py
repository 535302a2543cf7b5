"""atm CLI — subscribe the host to repository topics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from atm import __version__
from atm.config import AtmPaths
from atm.errors import AtmError
from atm.i18n import Localizer
from atm.log import get_logger, setup_logging
from atm.models import TopicManifest

if TYPE_CHECKING:
    from atm.state.snapshot import SnapshotStore

console = Console()
logger = get_logger(__name__)


@dataclass
class Session:
    """Per-invocation services, built once by the group callback."""

    paths: AtmPaths
    fl: Localizer
    manifest_source: str | None = None

    def manifests(self) -> list[TopicManifest]:
        from atm.system.manifest import get_manifests

        return get_manifests(self.manifest_source)

    def store(self) -> SnapshotStore:
        from atm.state.snapshot import SnapshotStore

        return SnapshotStore(self.paths.state_file, self.paths.state_dir)

    def fail(self, error: AtmError) -> None:
        logger.debug("command_failed", error=str(error), kind=type(error).__name__)
        console.print(f"[red]{escape(self.fl('error', message=str(error)))}[/]")
        raise click.exceptions.Exit(1)


pass_session = click.make_pass_decorator(Session)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Operate on a system tree mounted at this path instead of /",
)
@click.option(
    "--manifest",
    "manifest_source",
    default=None,
    help="Topic manifest URL or local topics.json (default: the repository's)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def main(ctx: click.Context, root: Path | None, manifest_source: str | None, verbose: bool):
    """atm — manage testing topic subscriptions for APT."""
    setup_logging(verbose)
    ctx.obj = Session(
        paths=AtmPaths.under(root) if root else AtmPaths(),
        fl=Localizer(),
        manifest_source=manifest_source,
    )


# ── List ─────────────────────────────────────────────────────────────


@main.command(name="list")
@pass_session
def list_topics(session: Session):
    """Show upstream topics and closed topics still in the snapshot."""
    from atm.state.reconcile import Reconciler

    try:
        listing = Reconciler(session.store()).display_listing(session.manifests())
    except AtmError as e:
        session.fail(e)

    fl = session.fl
    if not listing:
        console.print(f"[yellow]{fl('topics-empty')}[/]")
        return

    table = Table(title=fl("topics-title"))
    table.add_column(fl("column-enabled"), justify="center", width=7)
    table.add_column(fl("column-name"), style="cyan")
    table.add_column(fl("column-date"), style="dim")
    table.add_column(fl("column-description"))

    for topic in listing:
        enabled = "[green]Y[/]" if topic.enabled else ""
        name = escape(topic.name)
        if topic.closed:
            name = f"{name} [red]{fl('topic-closed')}[/]"
        table.add_row(
            enabled,
            name,
            _format_date(topic.date),
            escape(topic.description or fl("no-description")),
        )

    console.print(table)


# ── Enable / Disable ─────────────────────────────────────────────────


@main.command()
@click.argument("names", nargs=-1, required=True)
@pass_session
def enable(session: Session, names: tuple[str, ...]):
    """Subscribe to one or more topics."""
    _set_enabled(session, names, True)


@main.command()
@click.argument("names", nargs=-1, required=True)
@pass_session
def disable(session: Session, names: tuple[str, ...]):
    """Unsubscribe from one or more topics."""
    _set_enabled(session, names, False)


def _set_enabled(session: Session, names: tuple[str, ...], enabled: bool) -> None:
    from atm.state.reconcile import Reconciler, enabled_topics
    from atm.state.sources import SourceListWriter

    store = session.store()
    try:
        listing = Reconciler(store).display_listing(session.manifests())
        by_name = {t.name: t for t in listing if not t.closed}

        pending = [t.name for t in listing if t.closed]
        if pending:
            console.print(
                f"[yellow]{escape(session.fl('closed-pending', names=', '.join(pending)))}[/]"
            )
            raise click.exceptions.Exit(1)

        for name in names:
            if name not in by_name:
                console.print(f"[red]{escape(session.fl('unknown-topic', name=name))}[/]")
                raise click.exceptions.Exit(1)
            by_name[name].enabled = enabled

        selected = enabled_topics(listing)
        SourceListWriter(session.paths, store).commit(selected)
    except AtmError as e:
        session.fail(e)

    console.print(
        f"[green]{escape(session.fl('commit-done', count=len(selected), path=session.paths.source_list))}[/]"
    )


# ── Closed ───────────────────────────────────────────────────────────


@main.command()
@click.option(
    "--prune",
    is_flag=True,
    help="Drop closed topics from the source list and snapshot after reporting",
)
@pass_session
def closed(session: Session, prune: bool):
    """Report topics closed upstream and the packages to reinstall from stable."""
    from atm.state.reconcile import Reconciler, display_listing, enabled_topics
    from atm.state.revert import apt_install_args, close_topics
    from atm.state.sources import SourceListWriter

    fl = session.fl
    store = session.store()
    try:
        current = session.manifests()
        gone = Reconciler(store).closed_topics(current)
        if not gone:
            console.print(f"[green]{fl('closed-none')}[/]")
            return

        names = ", ".join(t.name for t in gone)
        console.print(f"[yellow]{escape(fl('closed-found', names=names))}[/]")

        directives = close_topics(gone, session.paths.dpkg_status)
        if directives:
            console.print(fl("revert-header"))
            for directive in directives:
                console.print(f"  [cyan]{escape(str(directive))}[/]")
            command = " ".join(apt_install_args(directives))
            console.print(escape(fl("revert-command", command=command)))
        else:
            console.print(fl("revert-none"))

        if prune:
            listing = display_listing(current, store.read())
            selected = enabled_topics(listing)
            SourceListWriter(session.paths, store).commit(selected)
            console.print(
                f"[green]{escape(fl('commit-done', count=len(selected), path=session.paths.source_list))}[/]"
            )
    except AtmError as e:
        session.fail(e)


def _format_date(timestamp: int) -> str:
    if not timestamp:
        return "-"
    try:
        return datetime.fromtimestamp(timestamp, timezone.utc).strftime("%Y-%m-%d")
    except (ValueError, OverflowError, OSError):
        return "-"


if __name__ == "__main__":
    main()
