from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from daykit_core import (
    Config,
    DaykitError,
    PathOptions,
    absolutize,
    clear_templates,
    config_path,
    initialize,
    initialize_scope,
    load_config,
    save_config,
)
from daykit_core.config import PATH_KINDS
from daykit_core.errors import ConfigError, DuplicateMemberError
from daykit_core.website import url_for_day


def _eprint(*args: object) -> None:
    print(*args, file=sys.stderr)


def _configure_logging(verbosity: int) -> None:
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=logging.WARNING,
    )
    if verbosity <= 0:
        return
    level = logging.INFO if verbosity == 1 else logging.DEBUG
    for name in ("daykit", "daykit_core"):
        logging.getLogger(name).setLevel(level)


def _year(args: argparse.Namespace) -> int:
    return args.year if args.year is not None else date.today().year


def _day(args: argparse.Namespace) -> int:
    if args.day is not None:
        return args.day
    today = date.today().day
    try:
        return _day_type(str(today))
    except argparse.ArgumentTypeError as exc:
        raise ConfigError(f"no puzzle for today (day {today}); pass -d/--day") from exc


def _day_type(value: str) -> int:
    try:
        day = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid day: {value!r}") from exc
    if not 1 <= day <= 25:
        raise argparse.ArgumentTypeError(f"day must be between 1 and 25, got {day}")
    return day


def _path_options(args: argparse.Namespace) -> PathOptions:
    return PathOptions(
        input_files=args.input_files,
        implementation=args.implementation,
        day_templates=args.day_templates,
    )


def _cmd_config_path(args: argparse.Namespace) -> int:
    print(config_path())
    return 0


def _cmd_config_show(args: argparse.Namespace) -> int:
    path = config_path()
    if not path.exists():
        _eprint(f"No configuration file at {path}")
        return 1
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e
    print(text, end="")
    return 0


def _cmd_config_set(args: argparse.Namespace) -> int:
    config = load_config()
    year = _year(args)
    if args.session is not None:
        if not args.session:
            raise ConfigError("session key must not be empty")
        config.session = args.session

    requested = {
        "input_files": args.input_files,
        "implementation": args.implementation,
        "day_template": args.day_templates,
    }
    for kind, path in requested.items():
        if path is None:
            continue
        if path.exists() and not path.is_dir():
            raise ConfigError(f"{kind} must be a directory: {path}")
        config.set_path(year, kind, absolutize(path))

    save_config(config)
    return 0


def _cmd_config_clear(args: argparse.Namespace) -> int:
    config = load_config()
    year = _year(args)
    for kind in PATH_KINDS:
        if getattr(args, kind):
            config.clear_path(year, kind)
    save_config(config)
    return 0


def _cmd_url(args: argparse.Namespace) -> int:
    print(url_for_day(_year(args), _day(args)))
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    config = load_config()
    year = _year(args)
    day = _day(args)
    day_dir = initialize(
        config,
        year,
        day,
        skip_create_crate=args.skip_create_crate,
        skip_get_input=args.skip_get_input,
    )
    if not args.skip_create_crate:
        print(f"Created {day_dir}")
    if not args.skip_get_input:
        print(f"Input: {config.input_for(year, day)}")
    return 0


def _cmd_init_year(args: argparse.Namespace) -> int:
    config = load_config()
    impl_path = initialize_scope(config, _year(args), _path_options(args))
    save_config(config)
    print(impl_path)
    return 0


def _cmd_clear_templates(args: argparse.Namespace) -> int:
    config: Config = load_config()
    print(f"Removed {clear_templates(config, _year(args))}")
    return 0


def _add_year_arg(p: argparse.ArgumentParser) -> None:
    p.add_argument("-y", "--year", type=int, help="Year (default: this year).")


def _add_date_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("-d", "--day", type=_day_type, help="Day (default: today's date).")
    _add_year_arg(p)


def _add_path_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--input-files", type=Path, help='Path to input files. Default: "$(pwd)/inputs".')
    p.add_argument(
        "--implementation", type=Path, help="Path to this year's implementation directory. Default: \"$(pwd)\"."
    )
    p.add_argument("--day-templates", type=Path, help="Path to this year's day template files.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="daykit", description="Advent of Code workspace tool.")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Log progress (-v) or debug details (-vv) to stderr."
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_config = sub.add_parser("config", help="Manage configuration.")
    config_sub = p_config.add_subparsers(dest="config_cmd", required=True)

    p_cpath = config_sub.add_parser("path", help="Emit the path to the configuration file.")
    p_cpath.set_defaults(func=_cmd_config_path)

    p_show = config_sub.add_parser("show", help="Display the contents of the configuration file, if it exists.")
    p_show.set_defaults(func=_cmd_config_show)

    p_set = config_sub.add_parser("set", help="Set configuration.")
    _add_year_arg(p_set)
    p_set.add_argument(
        "-s",
        "--session",
        help="Website session key. Log in to adventofcode.com and inspect the cookies to get this.",
    )
    _add_path_args(p_set)
    p_set.set_defaults(func=_cmd_config_set)

    p_clear = config_sub.add_parser("clear", help="Clear configured paths.")
    _add_year_arg(p_clear)
    p_clear.add_argument("--input-files", action="store_true", help="Clear path to input files.")
    p_clear.add_argument(
        "--implementation", action="store_true", help="Clear path to this year's implementation directory."
    )
    p_clear.add_argument("--day-template", action="store_true", help="Clear path to this year's day template files.")
    p_clear.set_defaults(func=_cmd_config_clear)

    p_url = sub.add_parser("url", help="Emit the URL to a specified puzzle.")
    _add_date_args(p_url)
    p_url.set_defaults(func=_cmd_url)

    p_init = sub.add_parser("init", help="Initialize a puzzle.")
    _add_date_args(p_init)
    p_init.add_argument(
        "--skip-create-crate", action="store_true", help="Do not create a sub-crate for the requested day."
    )
    p_init.add_argument(
        "--skip-get-input", action="store_true", help="Do not attempt to fetch the input for the requested day."
    )
    p_init.set_defaults(func=_cmd_init)

    p_year = sub.add_parser("init-year", help="Initialize a repository for a year's solutions.")
    _add_year_arg(p_year)
    _add_path_args(p_year)
    p_year.set_defaults(func=_cmd_init_year)

    p_ct = sub.add_parser("clear-templates", help="Clear the day templates so they are downloaded again.")
    _add_year_arg(p_ct)
    p_ct.set_defaults(func=_cmd_clear_templates)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Run the CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        rc = int(args.func(args))
    except DaykitError as exc:
        _eprint(f"ERROR: {exc}")
        if isinstance(exc, DuplicateMemberError):
            _eprint(
                f"Re-running will not fix this. Remove {exc.member!r} from workspace.members "
                "(and its directory, if unwanted) by hand first."
            )
        member = exc.details.get("member_added")
        if member:
            _eprint(
                f"{member!r} was already added to workspace.members in {exc.details.get('manifest')}; "
                "remove it by hand before re-running."
            )
        written = exc.details.get("written")
        if written:
            _eprint("Files written before the failure were left in place:")
            for path in written:
                _eprint(f"- {path}")
        raise SystemExit(2) from None
    raise SystemExit(rc)


if __name__ == "__main__":
    main()
