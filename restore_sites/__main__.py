"""Command-line entry point for restore-sites."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .errors import ParseError, RestoreSitesError, ValidationError
from .log import logger, setup_logging
from .models import (
    BrowserKind,
    BrowserMode,
    BrowserProfile,
    CollectionConfig,
    CollectionRecord,
    SiteEntry,
)
from .platform import abbreviate_home
from .preferences import load_preferences
from .services import RestoreSites
from .urls import clean_url, extract_domain

_MODES = [m.value.lower() for m in BrowserMode]

# ---------------------------------------------------------------------------
# Argument helpers
# ---------------------------------------------------------------------------


def _sites_from_urls(urls: list[str]) -> list[SiteEntry]:
    sites = []
    for raw in urls:
        url = clean_url(raw)
        if url is None:
            raise ValidationError(f"Not a web address: {raw!r}")
        sites.append(SiteEntry(title=extract_domain(url), url=url))
    return sites


def _browser_from_args(args: argparse.Namespace) -> BrowserKind | None:
    if getattr(args, "custom", None):
        return BrowserKind.custom(args.custom)
    if getattr(args, "browser", None):
        return BrowserKind.parse(args.browser)
    return None


def _config_from_args(args: argparse.Namespace) -> CollectionConfig:
    return CollectionConfig(
        browser_profile_id=args.profile,
        browser=_browser_from_args(args),
        mode=BrowserMode.parse(args.mode) if args.mode else None,
        custom_path=args.path,
    )


def _add_config_options(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("browser")
    group.add_argument("--profile", help="id of a stored browser profile")
    group.add_argument("--browser", help="chrome, firefox, safari or edge")
    group.add_argument("--custom", metavar="NAME", help="custom browser app or executable")
    group.add_argument("--mode", choices=_MODES, help="window mode")
    group.add_argument("--path", help="browser executable to use")


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _collections_table(records: list[CollectionRecord]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Sites", justify="right")
    table.add_column("Browser")
    table.add_column("Updated")
    for record in records:
        config = record.config
        if config.browser_profile_id:
            browser = f"profile:{config.browser_profile_id}"
        elif config.browser:
            browser = str(config.browser)
        else:
            browser = "default"
        table.add_row(
            str(record.id),
            escape(record.name),
            str(len(record.sites)),
            escape(browser),
            record.updated_at.strftime("%Y-%m-%d %H:%M"),
        )
    return table


def _profiles_table(profiles: list[BrowserProfile]) -> Table:
    table = Table(show_header=True, header_style="bold")
    for column in ("ID", "Name", "Browser", "Mode", "Default", "Detected"):
        table.add_column(column)
    for profile in profiles:
        table.add_row(
            escape(profile.id),
            escape(profile.name),
            escape(str(profile.browser)),
            profile.mode.value,
            "yes" if profile.is_default else "",
            "yes" if profile.is_detected else "no",
        )
    return table


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_list(app: RestoreSites, args: argparse.Namespace, console: Console) -> int:
    records = app.collections.load_all_collections()
    if not records:
        console.print("No saved collections.")
        return 0
    console.print(_collections_table(records))
    return 0


def _cmd_search(app: RestoreSites, args: argparse.Namespace, console: Console) -> int:
    records = app.collections.search_collections(args.query)
    if not records:
        console.print(f"No collections match {escape(args.query)!r}.")
        return 0
    console.print(_collections_table(records))
    return 0


def _cmd_show(app: RestoreSites, args: argparse.Namespace, console: Console) -> int:
    record = app.collections.get_collection(args.id)
    if record is None:
        console.print(f"[red]Collection {args.id} not found.[/red]")
        return 1
    console.print(f"[bold]{escape(record.name)}[/bold] (#{record.id})")
    for index, site in enumerate(record.sites, 1):
        console.print(f"  {index:>3}. {escape(site.title)}  [dim]{escape(site.url)}[/dim]")
    return 0


def _cmd_save(app: RestoreSites, args: argparse.Namespace, console: Console) -> int:
    record = app.collections.save_collection(
        _sites_from_urls(args.urls), name=args.name, config=_config_from_args(args)
    )
    console.print(f"Saved [bold]{escape(record.name)}[/bold] as #{record.id}.")
    return 0


def _cmd_delete(app: RestoreSites, args: argparse.Namespace, console: Console) -> int:
    if app.collections.delete_collection(args.id):
        console.print(f"Deleted collection {args.id}.")
        return 0
    console.print(f"[yellow]Collection {args.id} not found.[/yellow]")
    return 1


def _cmd_restore(app: RestoreSites, args: argparse.Namespace, console: Console) -> int:
    record = app.restore_collection(args.id)
    console.print(f"Opened {len(record.sites)} site(s) from {escape(record.name)}.")
    return 0


def _cmd_open(app: RestoreSites, args: argparse.Namespace, console: Console) -> int:
    sites = _sites_from_urls(args.urls)
    app.restore(sites, _config_from_args(args))
    console.print(f"Opened {len(sites)} site(s).")
    return 0


def _cmd_profiles(app: RestoreSites, args: argparse.Namespace, console: Console) -> int:
    registry = app.profiles
    action = args.profiles_action
    if action == "add":
        browser = _browser_from_args(args)
        if browser is None:
            raise ValidationError("--browser or --custom is required")
        profile = BrowserProfile.new(
            args.id,
            args.name,
            browser,
            BrowserMode.parse(args.mode),
            custom_path=args.path,
        )
        profile.is_detected = registry.detector.detect(browser)
        registry.create_profile(profile)
        if args.default:
            registry.set_default_profile(profile.id)
        console.print(f"Created profile {escape(profile.id)}.")
        return 0
    if action == "remove":
        if registry.delete_profile(args.id):
            console.print(f"Deleted profile {escape(args.id)}.")
            return 0
        console.print(f"[yellow]Profile {escape(args.id)} not found.[/yellow]")
        return 1
    if action == "default":
        registry.set_default_profile(args.id)
        console.print(f"Default profile is now {escape(args.id)}.")
        return 0
    profiles = (
        registry.update_all_detection_status()
        if action == "detect"
        else registry.get_all_profiles()
    )
    if not profiles:
        console.print("No browser profiles.")
        return 0
    console.print(_profiles_table(profiles))
    return 0


def _cmd_mode(app: RestoreSites, args: argparse.Namespace, console: Console) -> int:
    if args.mode:
        mode = BrowserMode.parse(args.mode)
        app.profiles.set_default_browser_mode(mode)
        console.print(f"Default browser mode set to {mode.value}.")
    else:
        console.print(app.profiles.get_default_browser_mode().value)
    return 0


def _cmd_export(app: RestoreSites, args: argparse.Namespace, console: Console) -> int:
    if args.file is None:
        sys.stdout.write(app.collections.export_database() + "\n")
        return 0

    def choose(suggested: str) -> Path:
        target = Path(args.file).expanduser()
        return target / suggested if target.is_dir() else target

    path = app.collections.export_database_to_file(choose)
    console.print(f"Exported to {escape(abbreviate_home(str(path)))}.")
    return 0


def _cmd_import(app: RestoreSites, args: argparse.Namespace, console: Console) -> int:
    try:
        text = Path(args.file).expanduser().read_text(encoding="utf-8")
    except OSError as exc:
        console.print(f"[red]Cannot read {escape(args.file)}: {escape(str(exc))}[/red]")
        return 1
    except UnicodeDecodeError as exc:
        raise ParseError(f"{args.file} is not UTF-8 text: {exc}") from exc
    count = app.collections.import_database(text, replace_existing=args.replace)
    console.print(f"Imported {count} collection(s).")
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="restore-sites",
        description="Save collections of browser tabs and reopen them later.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--data-dir", help="directory holding db.json")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="list saved collections").set_defaults(func=_cmd_list)

    p = sub.add_parser("search", help="find collections by name")
    p.add_argument("query")
    p.set_defaults(func=_cmd_search)

    p = sub.add_parser("show", help="show the sites of a collection")
    p.add_argument("id", type=int)
    p.set_defaults(func=_cmd_show)

    p = sub.add_parser("save", help="save URLs as a new collection")
    p.add_argument("urls", nargs="+")
    p.add_argument("--name")
    _add_config_options(p)
    p.set_defaults(func=_cmd_save)

    p = sub.add_parser("delete", help="delete a collection")
    p.add_argument("id", type=int)
    p.set_defaults(func=_cmd_delete)

    p = sub.add_parser("restore", help="open every site of a collection")
    p.add_argument("id", type=int)
    p.set_defaults(func=_cmd_restore)

    p = sub.add_parser("open", help="open URLs without saving them")
    p.add_argument("urls", nargs="+")
    _add_config_options(p)
    p.set_defaults(func=_cmd_open)

    p = sub.add_parser("profiles", help="manage browser profiles")
    psub = p.add_subparsers(dest="profiles_action")
    psub.add_parser("list")
    psub.add_parser("detect", help="re-check which browsers are installed")
    add = psub.add_parser("add")
    add.add_argument("id")
    add.add_argument("name")
    add.add_argument("--browser", help="chrome, firefox, safari or edge")
    add.add_argument("--custom", metavar="NAME", help="custom browser app or executable")
    add.add_argument("--mode", choices=_MODES, default="normal")
    add.add_argument("--path", help="browser executable to use")
    add.add_argument("--default", action="store_true", help="make it the default profile")
    rm = psub.add_parser("remove")
    rm.add_argument("id")
    default = psub.add_parser("default", help="set the default profile")
    default.add_argument("id")
    p.set_defaults(func=_cmd_profiles, profiles_action="list")

    p = sub.add_parser("mode", help="show or set the global default mode")
    p.add_argument("mode", nargs="?", choices=_MODES)
    p.set_defaults(func=_cmd_mode)

    p = sub.add_parser("export", help="export the database as JSON")
    p.add_argument("file", nargs="?", help="file or directory (default: stdout)")
    p.set_defaults(func=_cmd_export)

    p = sub.add_parser("import", help="import a JSON export")
    p.add_argument("file")
    p.add_argument("--replace", action="store_true", help="discard existing data first")
    p.set_defaults(func=_cmd_import)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    prefs = load_preferences()
    level = ("DEBUG" if args.verbose > 1 else "INFO") if args.verbose else prefs.log_level
    setup_logging(level)

    data_dir = Path(args.data_dir).expanduser() if args.data_dir else prefs.data_dir
    app = RestoreSites(data_dir, launch_delay=prefs.launch_delay)
    console = Console()
    try:
        return args.func(app, args, console)
    except RestoreSitesError as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        Console(stderr=True).print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
