"""``dotfiles config``: inspect and override installer settings.

    dotfiles config show [--defaults]
    dotfiles config get links.linkables
    dotfiles config set [--global] links.backup_extra ".vim,.vimrc"
    dotfiles config reset [--global] links.backup_extra

Overrides are local to the checkout unless ``--global`` is given.  List
values are written comma-separated.
"""

from __future__ import annotations

import argparse
import dataclasses
from typing import TYPE_CHECKING

import dotfiles.config
import dotfiles.console
import dotfiles.links.config  # noqa: F401
import dotfiles.setup.config  # noqa: F401

if TYPE_CHECKING:
    from dotfiles.env import Environment


def _dotted_key(value: str) -> tuple[str, str]:
    section, sep, key = value.partition(".")
    if not sep or not section or not key:
        raise argparse.ArgumentTypeError(
            f"invalid key {value!r}, expected section.key (e.g. links.bin_dir)"
        )
    return section, key


def _scope(args: argparse.Namespace) -> str:
    return "global" if args.global_scope else "local"


def _default(f: dataclasses.Field) -> object:
    if f.default_factory is not dataclasses.MISSING:
        return f.default_factory()
    return f.default


def cmd_show(args: argparse.Namespace, env: Environment) -> int:
    """Print every setting with the layer its value came from."""
    for name, cls in dotfiles.config.sections().items():
        print(f"[{name}]")
        if args.defaults:
            for f in dataclasses.fields(cls):
                print(f"  {f.name}: {f.type} = {_default(f)!r}")
        else:
            local = dotfiles.config.overrides(name, env, "local")
            user = dotfiles.config.overrides(name, env, "global")
            current = dotfiles.config.load(name, env)
            for f in dataclasses.fields(current):
                if f.name in local:
                    origin = "local"
                elif f.name in user:
                    origin = "global"
                else:
                    origin = "default"
                print(f"  {f.name} = {getattr(current, f.name)!r}  ({origin})")
        print()
    return 0


def cmd_get(args: argparse.Namespace, env: Environment) -> int:
    section, key = args.key
    try:
        current = dotfiles.config.load(section, env)
        value = getattr(current, key)
    except (KeyError, AttributeError) as exc:
        dotfiles.console.error(f"unknown setting {section}.{key}: {exc}")
        return 1
    if isinstance(value, list):
        print(",".join(value))
    else:
        print(value)
    return 0


def cmd_set(args: argparse.Namespace, env: Environment) -> int:
    section, key = args.key
    try:
        path = dotfiles.config.set_value(
            section, key, args.value, env=env, scope=_scope(args)
        )
    except (KeyError, ValueError) as exc:
        dotfiles.console.error(f"cannot set {section}.{key}: {exc}")
        return 1
    dotfiles.console.info(f"{section}.{key} set in {env.display(path)}")
    return 0


def cmd_reset(args: argparse.Namespace, env: Environment) -> int:
    section, key = args.key
    scope = _scope(args)
    if dotfiles.config.reset_value(section, key, env=env, scope=scope):
        dotfiles.console.info(f"{section}.{key} reset to its inherited value")
    else:
        dotfiles.console.warning(f"{section}.{key} has no {scope} override")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dotfiles config",
        description="Inspect and override dotfiles installer settings.",
    )
    sub = parser.add_subparsers(dest="subcmd", required=True)

    show = sub.add_parser("show", help="Print effective settings")
    show.add_argument(
        "--defaults", action="store_true", help="Print built-in defaults and types"
    )
    show.set_defaults(func=cmd_show)

    get = sub.add_parser("get", help="Print one effective value")
    get.add_argument("key", type=_dotted_key, help="section.key")
    get.set_defaults(func=cmd_get)

    scoped = argparse.ArgumentParser(add_help=False)
    scoped.add_argument(
        "--global",
        dest="global_scope",
        action="store_true",
        help="Use $XDG_CONFIG_HOME/dotfiles/config.toml instead of the checkout",
    )

    set_ = sub.add_parser("set", parents=[scoped], help="Store an override")
    set_.add_argument("key", type=_dotted_key, help="section.key")
    set_.add_argument("value", help="New value (lists comma-separated)")
    set_.set_defaults(func=cmd_set)

    reset = sub.add_parser("reset", parents=[scoped], help="Drop an override")
    reset.add_argument("key", type=_dotted_key, help="section.key")
    reset.set_defaults(func=cmd_reset)

    return parser


def main(argv: list[str], env: Environment) -> int:
    """Entry point for ``dotfiles config``; argparse errors exit with status 2."""
    args = build_parser().parse_args(argv)
    return args.func(args, env)
