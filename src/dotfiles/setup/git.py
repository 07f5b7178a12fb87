"""Interactive git identity and credential helper setup."""

from __future__ import annotations

from typing import TYPE_CHECKING

import dotfiles.console
import dotfiles.runner

if TYPE_CHECKING:
    from dotfiles.env import Environment
    from dotfiles.setup.config import GitConfig

_IDENTITY_KEYS = (
    ("user.name", "Name"),
    ("user.email", "Email"),
    ("github.user", "Github username"),
)


def ask(label: str, default: str) -> str:
    """Prompt for a value; an empty answer keeps *default*."""
    answer = input(f"{label} [{default}] ").strip()
    return answer or default


def credential_helper(env: Environment, cfg: GitConfig) -> str:
    """Pick the credential helper for this host, asking on non-macOS."""
    if env.is_macos:
        return "osxkeychain"
    answer = input(
        "Save user and password to an unencrypted file to avoid writing? [y/N] "
    ).strip()
    if answer in ("y", "Y"):
        return "store"
    return f"cache --timeout {cfg.cache_timeout}"


def setup_git(env: Environment, cfg: GitConfig, *, dry_run: bool = False) -> None:
    """Write name/email/GitHub user to the local gitconfig and set a helper."""
    dotfiles.console.title("Setting up Git")

    local_config = env.home / cfg.local_config
    values: list[tuple[str, str]] = []
    for key, label in _IDENTITY_KEYS:
        default = dotfiles.runner.output(["git", "config", key])
        values.append((key, ask(label, default)))

    for key, value in values:
        dotfiles.runner.run(
            ["git", "config", "-f", str(local_config), key, value],
            dry_run=dry_run,
        )

    helper = credential_helper(env, cfg)
    dotfiles.runner.run(
        ["git", "config", "--global", "credential.helper", helper],
        dry_run=dry_run,
    )
    dotfiles.console.info(f"credential.helper set to {helper!r}")
