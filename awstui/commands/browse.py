"""
Interactive browser for aws-tui.

Runs in a single process so that navigating back and forth between
categories reuses cached results instead of calling AWS every time.
"""

import click
from typing import List, Optional

from awstui.collectors.aws import CATEGORIES, CollectorError
from awstui.collectors.profiles import list_profiles
from awstui.utils.output import OutputFormatter

HELP_TEXT = (
    "Commands: <number|name> show  r [name] refresh  R refresh all  "
    "w warm all  p <profile> switch profile  c cache stats  q quit"
)


class BrowseSession:
    """Menu state of one interactive browse session"""

    def __init__(self, ctx):
        self.ctx = ctx
        self.names: List[str] = list(CATEGORIES)
        self.current: Optional[str] = None
        self.formatter = OutputFormatter(ctx.output_format)

    def show_menu(self):
        click.echo(f"\nProfile: {self.ctx.active_profile} ({self.ctx.active_region})")
        width = max(len(name) for name in self.names)
        for idx, name in enumerate(self.names, 1):
            click.echo(f"  {idx:>2}. {name.ljust(width)}  {CATEGORIES[name].label}")
        click.echo(HELP_TEXT)

    def resolve(self, token: str) -> Optional[str]:
        if token.isdigit():
            idx = int(token) - 1
            return self.names[idx] if 0 <= idx < len(self.names) else None
        return token if token in CATEGORIES else None

    def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the session should end."""
        parts = line.split()
        if not parts:
            self.show_menu()
            return True

        command, args = parts[0], parts[1:]
        if command in ('q', 'quit', 'exit'):
            return False

        try:
            if command == 'c':
                self.formatter.output(self.ctx.cache.stats(), title="Cache")
            elif command == 'R':
                removed = self.ctx.get_collector().refresh()
                click.echo(f"Dropped {removed} cached entries for {self.ctx.active_profile}")
            elif command == 'r':
                self._refresh(args[0] if args else self.current)
            elif command == 'w':
                self._warm()
            elif command == 'p':
                self._switch_profile(args[0] if args else None)
            else:
                self._show(command)
        except CollectorError as e:
            click.echo(f"Error: {e}", err=True)
        return True

    def _show(self, token: str):
        name = self.resolve(token)
        if name is None:
            click.echo(f"Unknown category: {token}", err=True)
            return
        self.current = name
        data = self.ctx.get_collector().collect(name)
        self.formatter.output(data, title=f"{CATEGORIES[name].label} - {self.ctx.active_profile}")

    def _refresh(self, token: Optional[str]):
        name = self.resolve(token) if token else None
        if name is None:
            click.echo("Nothing to refresh: pick a category first", err=True)
            return
        self.ctx.get_collector().refresh(name)
        self._show(name)

    def _warm(self):
        results = self.ctx.get_collector().prefetch(self.names)
        failed = sorted(name for name, value in results.items() if isinstance(value, Exception))
        click.echo(f"Warmed {len(results) - len(failed)}/{len(results)} categories")
        for name in failed:
            click.echo(f"  {name}: {results[name]}", err=True)

    def _switch_profile(self, profile: Optional[str]):
        available = list_profiles()
        if not profile or profile not in available:
            click.echo(f"Available profiles: {', '.join(available)}", err=True)
            return
        self.ctx.use_profile(profile)
        self.current = None
        click.echo(f"Switched to profile {profile}")


@click.command()
@click.pass_obj
def browse(ctx):
    """Browse resource categories interactively"""
    session = BrowseSession(ctx)
    ctx.start_sweeper()
    try:
        session.show_menu()
        while True:
            line = click.prompt('aws-tui', default='', show_default=False, prompt_suffix='> ')
            if not session.handle(line):
                break
    except click.Abort:
        click.echo()
    finally:
        ctx.close()
