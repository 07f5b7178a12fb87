"""dotfiles: install a dotfiles checkout into the current user's home.

Usage:
    dotfiles [-n] [-v] <command>

Commands:
    backup      Copy existing dotfiles into ~/dotfiles-backup
    clean       Remove symlinks created by `link`
    link        Symlink config files into $HOME and $XDG_CONFIG_HOME
    copy        Copy config/ entries into $XDG_CONFIG_HOME instead of linking
    git         Set git identity and credential helper (interactive)
    homebrew    Install Homebrew, the Brewfile bundle, and fzf bindings
    shell       Make zsh the default shell
    macos       Apply macOS preferences
    status      Show the state of every managed target
    all         link, homebrew, shell, git, macos
    config <cmd> Show or change installer settings (see `dotfiles config -h`)

Options:
    -n, --dry-run   Print what would change without touching anything
    -v, --verbose   Log every external command

Options may come before or after the command.
The dotfiles root is $DOTFILES, or the current directory when unset.
"""

from __future__ import annotations

import dataclasses
import logging
import subprocess
import sys
from typing import TYPE_CHECKING

import httpx

import dotfiles.config
import dotfiles.config_cli
import dotfiles.console
import dotfiles.env
import dotfiles.links.backup
import dotfiles.links.config
import dotfiles.links.symlinks
import dotfiles.setup.config
import dotfiles.setup.git
import dotfiles.setup.homebrew
import dotfiles.setup.macos
import dotfiles.setup.shell

if TYPE_CHECKING:
    from collections.abc import Callable

    from dotfiles.links.report import LinkReport

logger = logging.getLogger("dotfiles")


@dataclasses.dataclass
class CliOptions:
    dry_run: bool = False
    verbose: bool = False


def parse_args(args: list[str]) -> tuple[CliOptions, list[str]]:
    """Pull global flags out of *args*, wherever they appear.

    Everything after ``config`` belongs to the config sub-CLI and is
    returned untouched.
    """
    opts = CliOptions()
    rest: list[str] = []
    for i, arg in enumerate(args):
        if rest and rest[0] == "config":
            rest.extend(args[i:])
            break
        if arg in ("--dry-run", "-n"):
            opts.dry_run = True
        elif arg in ("--verbose", "-v"):
            opts.verbose = True
        else:
            rest.append(arg)
    return opts, rest


def _report_code(report: LinkReport) -> int:
    return 0 if report.ok else 1


def _cmd_backup(env: dotfiles.env.Environment, opts: CliOptions) -> int:
    cfg = dotfiles.config.load("links", env)
    report = dotfiles.links.backup.backup(env, cfg, dry_run=opts.dry_run)
    return _report_code(report)


def _cmd_clean(env: dotfiles.env.Environment, opts: CliOptions) -> int:
    cfg = dotfiles.config.load("links", env)
    report = dotfiles.links.symlinks.cleanup_symlinks(env, cfg, dry_run=opts.dry_run)
    return _report_code(report)


def _cmd_link(env: dotfiles.env.Environment, opts: CliOptions) -> int:
    cfg = dotfiles.config.load("links", env)
    report = dotfiles.links.symlinks.setup_symlinks(env, cfg, dry_run=opts.dry_run)
    return _report_code(report)


def _cmd_copy(env: dotfiles.env.Environment, opts: CliOptions) -> int:
    report = dotfiles.links.symlinks.copy_configs(env, dry_run=opts.dry_run)
    return _report_code(report)


def _cmd_git(env: dotfiles.env.Environment, opts: CliOptions) -> int:
    cfg = dotfiles.config.load("git", env)
    try:
        dotfiles.setup.git.setup_git(env, cfg, dry_run=opts.dry_run)
    except (KeyboardInterrupt, EOFError):
        print()
        dotfiles.console.error("git setup aborted")
        return 1
    return 0


def _cmd_homebrew(env: dotfiles.env.Environment, opts: CliOptions) -> int:
    cfg = dotfiles.config.load("homebrew", env)
    try:
        dotfiles.setup.homebrew.setup_homebrew(env, cfg, dry_run=opts.dry_run)
    except httpx.HTTPError as exc:
        dotfiles.console.error(f"could not download the Homebrew installer: {exc}")
        return 1
    return 0


def _cmd_shell(env: dotfiles.env.Environment, opts: CliOptions) -> int:
    return dotfiles.setup.shell.setup_shell(env, dry_run=opts.dry_run)


def _cmd_macos(env: dotfiles.env.Environment, opts: CliOptions) -> int:
    cfg = dotfiles.config.load("macos", env)
    dotfiles.setup.macos.setup_macos(env, cfg, dry_run=opts.dry_run)
    return 0


def _cmd_status(env: dotfiles.env.Environment, opts: CliOptions) -> int:
    del opts
    cfg = dotfiles.config.load("links", env)
    print(f"Dotfiles root: {env.dotfiles}")
    print()
    for target, state in dotfiles.links.symlinks.link_status(env, cfg):
        print(f"  {state:<13s} {env.display(target)}")
    return 0


def _run_step(
    step: Callable[[dotfiles.env.Environment, CliOptions], int],
    env: dotfiles.env.Environment,
    opts: CliOptions,
) -> int:
    """Run one command, turning subprocess failures into an exit code."""
    try:
        return step(env, opts)
    except subprocess.CalledProcessError as exc:
        cmd = exc.cmd if isinstance(exc.cmd, str) else " ".join(map(str, exc.cmd))
        dotfiles.console.error(f"`{cmd}` failed with code {exc.returncode}")
        return exc.returncode
    except OSError as exc:
        dotfiles.console.error(str(exc))
        return 1


def _cmd_all(env: dotfiles.env.Environment, opts: CliOptions) -> int:
    for step in (_cmd_link, _cmd_homebrew, _cmd_shell, _cmd_git, _cmd_macos):
        code = _run_step(step, env, opts)
        if code != 0:
            return code
    return 0


_COMMANDS: dict[str, Callable[[dotfiles.env.Environment, CliOptions], int]] = {
    "backup": _cmd_backup,
    "clean": _cmd_clean,
    "link": _cmd_link,
    "copy": _cmd_copy,
    "git": _cmd_git,
    "homebrew": _cmd_homebrew,
    "shell": _cmd_shell,
    "macos": _cmd_macos,
    "status": _cmd_status,
    "all": _cmd_all,
}


def run(argv: list[str]) -> int:
    """Dispatch *argv* (without the program name) and return the exit code."""
    opts, args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if opts.verbose else logging.INFO,
        format="%(message)s",
    )

    if not args:
        print(__doc__)
        return 1

    cmd, extra = args[0], args[1:]
    if cmd in ("-h", "--help", "help"):
        print(__doc__)
        return 0

    env = dotfiles.env.Environment.from_environ()
    logger.debug("dotfiles root: %s", env.dotfiles)
    if cmd == "config":
        return dotfiles.config_cli.main(extra, env)

    step = _COMMANDS.get(cmd)
    if step is None or extra:
        if extra:
            dotfiles.console.error(f"unexpected arguments: {' '.join(extra)}")
        print(__doc__)
        return 1

    code = _run_step(step, env, opts)
    if code == 0:
        print()
        dotfiles.console.success("Done.")
    return code


def main() -> None:
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
