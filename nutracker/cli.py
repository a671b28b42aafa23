from __future__ import annotations

import argparse
import sys
import webbrowser

from nutracker import config, repos
from nutracker.labels import CHARTER, COMMENT, DESIGN, ParseFlagError, Taxonomy
from nutracker.locator import Locator, LocatorError
from nutracker.models import AssigneeQuery, OriginQuery, ReportFormat, ResultFormatError, Settings
from nutracker.reviews import COLUMN_HELP, COMMENT_KIND, DESIGN_KIND, UnknownColumn

_FORMAT_CHOICES = [f.value for f in ReportFormat]


def _report_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "-r", "--report", dest="formats", nargs="+", choices=_FORMAT_CHOICES, default=["table"],
        metavar="FORMAT", help="Output format(s): table, meeting, agenda, web (default: table)",
    )
    return parent


def _assignee_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    group = parent.add_mutually_exclusive_group()
    group.add_argument("-u", "--assignee", metavar="USER", help="Only those assigned to USER (use '@me' for yourself)")
    group.add_argument("-U", "--no-assignee", action="store_true", help="Only those without assignees")
    return parent


def _status_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("-f", "--status-flags", action="store_true", help="List known status flags and their labels")
    parent.add_argument("-s", "--status", default="", metavar="FLAGS", help="Only those with these status labels, by flag letter(s), e.g. 'TAP'")
    parent.add_argument("-S", "--not-status", default="", metavar="FLAGS", help="Only those without these status labels, by flag letter(s)")
    return parent


def _issue_action_parent() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False, parents=[_assignee_parent(), _report_parent()])
    parent.add_argument("-g", dest="include_group", action="store_true", help="Include the group's repos")
    parent.add_argument("-t", dest="include_tfs", nargs="*", metavar="TF", default=None, help="Include TFs' repos (all TFs if no names given)")
    parent.add_argument("-m", "--main", action="store_true", help="Include main group/TF repos only")
    parent.add_argument("-l", "--label", nargs="+", default=[], metavar="LABEL", help="Only those with all of the given labels")
    parent.add_argument("-c", "--closed", action="store_true", help="Include closed ones")
    return parent


def _review_parent(columns: tuple[str, ...]) -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False, parents=[_status_parent(), _assignee_parent(), _report_parent()])
    parent.add_argument("-p", "--spec", default=None, help="Filter by spec, or spec group (e.g. 'open-ui')")
    parent.add_argument("-i", "--show-source", action="store_true", help="Show the source issue column in the table")
    parent.add_argument("--columns", nargs="+", choices=columns, default=None, metavar="FIELD", help=f"Columns to include in the table ({', '.join(columns)})")
    parent.add_argument("number", nargs="?", type=int, default=None, help="Request number (only) to open in the browser (e.g. '42')")
    return parent


def _columns_epilog(columns: tuple[str, ...]) -> str:
    width = max(len(c) for c in columns)
    lines = [f"  {c:<{width}}  {COLUMN_HELP[c]}" for c in columns]
    return "table columns:\n" + "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nt",
        description="Nu Tracker: track W3C actions and horizontal review requests",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Print out the 'gh' command lines etc.")
    parser.add_argument("--as", dest="as_group", metavar="GROUP", default=None, help="Operate from the perspective of GROUP (overrides settings)")
    parser.add_argument("--repos-file", metavar="FILE", default=None, help="Load repository info from a custom YAML file")

    sub = parser.add_subparsers(dest="command", required=True)

    issues = sub.add_parser("issues", parents=[_issue_action_parent()], help="Query issues; gh displays the results")
    issues.add_argument("-a", "--actions", action="store_true", help="Include actions (issues labelled 'action')")
    sub.add_parser("actions", parents=[_issue_action_parent()], help="Query actions; report them by due date")

    comments = sub.add_parser(
        "comments", parents=[_review_parent(COMMENT_KIND.columns)], help="List requests for comments on other groups' issues",
        epilog=_columns_epilog(COMMENT_KIND.columns), formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    origin = comments.add_mutually_exclusive_group()
    origin.add_argument("-o", "--ours", action="store_true", help="Only requests originating from our group")
    origin.add_argument("-O", "--others", action="store_true", help="Only requests originating from other groups")
    sub.add_parser(
        "designs", parents=[_review_parent(DESIGN_KIND.columns)], help="List requests for comments on other groups' designs",
        epilog=_columns_epilog(DESIGN_KIND.columns), formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    specs = sub.add_parser("specs", parents=[_assignee_parent(), _report_parent()], help="List spec review requests by due date, or open one")
    specs.add_argument("number", nargs="?", type=int, default=None, help="Review number (only) to open in the browser")

    charters = sub.add_parser("charters", parents=[_status_parent(), _report_parent()], help="List charter review requests, or open one")
    charters.add_argument("number", nargs="?", type=int, default=None, help="Review number (only) to open in the browser")

    browse = sub.add_parser("browse", help="Open a specific GitHub issue in your browser")
    browse.add_argument("locator", help="Issue to open (e.g. 'w3c/apa#42')")

    cfg = sub.add_parser("config", help="Manage settings")
    cfg_sub = cfg.add_subparsers(dest="config_command", required=True)
    cfg_sub.add_parser("show-dir", help="Show the configuration directory path (without creating it)")
    group = cfg_sub.add_parser("group", help="Get or set the default group")
    group.add_argument("group", nargs="?", default=None)
    comment_columns = cfg_sub.add_parser("comment-columns", help="Get or set the default columns for the comments table")
    comment_columns.add_argument("columns", nargs="*", metavar="FIELD", help=f"One or more of: {', '.join(COMMENT_KIND.columns)}")
    design_columns = cfg_sub.add_parser("design-columns", help="Get or set the default columns for the designs table")
    design_columns.add_argument("columns", nargs="*", metavar="FIELD", help=f"One or more of: {', '.join(DESIGN_KIND.columns)}")
    cfg_sub.add_parser("repos-info", help="Print out the default repository info in YAML format")

    return parser


def open_locator(text: str) -> int:
    try:
        locator = Locator.parse(text)
    except LocatorError:
        print(f"Invalid issue locator: {text}")
        return 0
    print(f"Opening: {locator.url()}")
    if not webbrowser.open(locator.url()):
        print("Warning: could not open a browser")
    return 0


def _formats(args: argparse.Namespace) -> list[ReportFormat]:
    return [ReportFormat(f) for f in args.formats]


def _assignee(args: argparse.Namespace) -> AssigneeQuery:
    return AssigneeQuery.from_args(args.assignee, args.no_assignee)


def _status_labels(taxonomy: Taxonomy, args: argparse.Namespace) -> tuple[list[str], list[str]]:
    return taxonomy.parse_flags(args.status), taxonomy.parse_flags(args.not_status)


def _run_config(args: argparse.Namespace) -> int:
    if args.config_command == "show-dir":
        print(config.config_dir())
        return 0
    if args.config_command == "repos-info":
        print(repos.default_repos_yaml(), end="")
        return 0

    settings = config.load_settings()
    if args.config_command == "group":
        return _config_group(args, settings)

    kind = COMMENT_KIND if args.config_command == "comment-columns" else DESIGN_KIND
    attr = "comment_columns" if kind is COMMENT_KIND else "design_columns"
    label = attr.replace("_", " ")
    if not args.columns:
        print(f"Default {label}: {', '.join(getattr(settings, attr))}")
        return 0
    unknown = [c for c in args.columns if c not in kind.columns]
    if unknown:
        print(f"Error: Unknown column(s) {', '.join(unknown)}; valid columns are: {', '.join(kind.columns)}", file=sys.stderr)
        return 2
    setattr(settings, attr, list(args.columns))
    config.save_settings(settings)
    print(f"Default {label} are now: {', '.join(args.columns)}")
    return 0


def _config_group(args: argparse.Namespace, settings: Settings) -> int:
    if args.group is None:
        print(f"Default group is: '{settings.group}'")
        print("You can override this temporarily via the --as option.")
        return 0
    if args.group == settings.group:
        print(f"Default group is already '{settings.group}'")
        return 0
    known = repos.Repos.load(args.repos_file or settings.repos_file)
    known.group(args.group)
    settings.group = args.group
    config.save_settings(settings)
    print(f"Default group is now '{settings.group}'")
    return 0


def _horizontal_review_repo(group: repos.GroupInfo, kind: str) -> str | None:
    if group.horizontal_review is None:
        print(f"Error: Group '{group.name}' is not a horizontal review group", file=sys.stderr)
        return None
    return getattr(group.horizontal_review, kind)


def _dispatch(args: argparse.Namespace) -> int:
    from nutracker import charters, issues, reviews, specs

    if args.command == "config":
        return _run_config(args)
    if args.command == "browse":
        return open_locator(args.locator)

    settings = config.load_settings()
    known = repos.Repos.load(args.repos_file or settings.repos_file)
    if args.as_group:
        group = known.group(args.as_group, "given on command line")
    else:
        group = known.group(settings.group, "specified in settings file")
    if args.verbose:
        print(f"Operating from the perspective of the '{group.name}' group")

    if args.command in ("issues", "actions"):
        selected = repos.get_repos(group, args.main, args.include_group, args.include_tfs)
        if args.command == "issues":
            issues.issues(selected, _assignee(args), args.label, args.closed, args.actions, _formats(args), args.verbose)
        else:
            issues.actions(selected, _assignee(args), args.label, args.closed, _formats(args), args.verbose)
        return 0

    if args.command in ("comments", "designs"):
        taxonomy = COMMENT if args.command == "comments" else DESIGN
        if args.status_flags:
            print(taxonomy.flags_labels_conflicts())
            return 0
        if args.command == "comments":
            repo = _horizontal_review_repo(group, "comments")
            if repo is None:
                return 2
        else:
            repo = repos.DESIGN_REVIEWS_REPO
        if args.number is not None:
            return open_locator(f"{repo}#{args.number}")
        status, not_status = _status_labels(taxonomy, args)
        if args.command == "comments":
            reviews.comments(
                repo, status, not_status, args.spec, _assignee(args),
                OriginQuery.from_flags(args.ours, args.others), args.show_source,
                args.columns or settings.comment_columns, _formats(args), args.verbose,
            )
        else:
            reviews.designs(
                repo, status, not_status, args.spec, _assignee(args), args.show_source,
                args.columns or settings.design_columns, _formats(args), args.verbose,
            )
        return 0

    if args.command == "specs":
        repo = _horizontal_review_repo(group, "specs")
        if repo is None:
            return 2
        if args.number is not None:
            return open_locator(f"{repo}#{args.number}")
        specs.specs(repo, _assignee(args), _formats(args), args.verbose)
        return 0

    if args.command == "charters":
        if args.status_flags:
            print(CHARTER.flags_labels_conflicts())
            return 0
        repo = repos.CHARTER_REVIEWS_REPO
        if args.number is not None:
            return open_locator(f"{repo}#{args.number}")
        status, not_status = _status_labels(CHARTER, args)
        charters.charters(repo, status, not_status, _formats(args), args.verbose)
        return 0

    raise AssertionError(f"unhandled command {args.command}")


def run(args: argparse.Namespace) -> int:
    from nutracker.github import GithubError
    from nutracker.pipeline import FormatNotSupported
    from nutracker.query import QueryError

    try:
        return _dispatch(args)
    except GithubError as exc:
        if exc.stdout:
            sys.stdout.write(exc.stdout)
        if exc.stderr:
            sys.stderr.write(exc.stderr)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except ResultFormatError as exc:
        print(f"Internal error: {exc}", file=sys.stderr)
        return 1
    except (
        repos.RepoSelectionError, repos.UnknownGroup, QueryError,
        FormatNotSupported, ParseFlagError, UnknownColumn, config.ConfigError,
    ) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    sys.exit(run(args))
