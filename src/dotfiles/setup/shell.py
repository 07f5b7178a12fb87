"""Make zsh the login shell."""

from __future__ import annotations

import getpass
import pathlib
from typing import TYPE_CHECKING

import dotfiles.console
import dotfiles.runner

if TYPE_CHECKING:
    from dotfiles.env import Environment

ETC_SHELLS = pathlib.Path("/etc/shells")


def zsh_path() -> str | None:
    """Prefer Homebrew's zsh, falling back to the one on ``PATH``."""
    if dotfiles.runner.which("brew"):
        prefix = dotfiles.runner.output(["brew", "--prefix"])
        if prefix:
            return str(pathlib.Path(prefix) / "bin" / "zsh")
    return dotfiles.runner.which("zsh")


def is_registered(path: str, shells_file: pathlib.Path = ETC_SHELLS) -> bool:
    """Return True if *path* is listed on its own line in *shells_file*."""
    try:
        lines = shells_file.read_text().splitlines()
    except OSError:
        return False
    return any(line.strip() == path for line in lines)


def setup_shell(
    env: Environment,
    *,
    dry_run: bool = False,
    shells_file: pathlib.Path = ETC_SHELLS,
) -> int:
    """Register zsh in /etc/shells and switch the user's default shell."""
    dotfiles.console.title("Configuring shell")

    path = zsh_path()
    if not path:
        dotfiles.console.error("zsh not found; install it first (dotfiles homebrew)")
        return 1

    if not is_registered(path, shells_file):
        dotfiles.console.info(f"adding {path} to {shells_file}")
        dotfiles.runner.run(
            ["sudo", "tee", "-a", str(shells_file)],
            input=f"{path}\n",
            dry_run=dry_run,
        )

    if env.shell != path:
        dotfiles.runner.run(
            ["sudo", "chsh", "-s", path, getpass.getuser()], dry_run=dry_run
        )
        dotfiles.console.info(f"default shell changed to {path}")
    return 0
