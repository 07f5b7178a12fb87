"""Install Homebrew, the Brewfile bundle, and fzf key bindings."""

from __future__ import annotations

import logging
import pathlib
from typing import TYPE_CHECKING

import httpx

import dotfiles.console
import dotfiles.runner

if TYPE_CHECKING:
    from dotfiles.env import Environment
    from dotfiles.setup.config import HomebrewConfig

logger = logging.getLogger("dotfiles.homebrew")

SYSTEM_LINUXBREW = pathlib.Path("/home/linuxbrew/.linuxbrew")


def fetch_installer(cfg: HomebrewConfig) -> str:
    """Download the Homebrew install script.

    Raises :class:`httpx.HTTPError` on network or HTTP failures.
    """
    logger.debug("GET %s", cfg.install_url)
    resp = httpx.get(
        cfg.install_url, follow_redirects=True, timeout=cfg.download_timeout
    )
    resp.raise_for_status()
    return resp.text


def install_homebrew(cfg: HomebrewConfig, *, dry_run: bool = False) -> None:
    dotfiles.console.info("Homebrew not installed. Installing.")
    if dry_run:
        dotfiles.console.dry_run(f"Would download {cfg.install_url} | bash --login")
        return
    script = fetch_installer(cfg)
    # A login shell keeps the installer from pausing for input
    dotfiles.runner.run(["bash", "--login"], input=script)


def linuxbrew_binary(env: Environment) -> pathlib.Path | None:
    """Return the first Linuxbrew ``brew`` found, if any."""
    for prefix in (env.home / ".linuxbrew", SYSTEM_LINUXBREW):
        candidate = prefix / "bin" / "brew"
        if candidate.exists():
            return candidate
    return None


def ensure_shellenv(
    env: Environment, brew: pathlib.Path, *, dry_run: bool = False
) -> bool:
    """Append the ``brew shellenv`` eval to ~/.bash_profile once.

    Returns True if the profile was (or would be) modified.
    """
    profile = env.home / ".bash_profile"
    if not profile.is_file():
        return False
    line = f'eval "$({brew} shellenv)"'
    existing = profile.read_text()
    if line in existing.splitlines():
        return False
    if dry_run:
        dotfiles.console.dry_run(f"Would append to {profile}: {line}")
        return True
    with profile.open("a") as fh:
        if existing and not existing.endswith("\n"):
            fh.write("\n")
        fh.write(line + "\n")
    return True


def brew_command(env: Environment) -> str:
    """Resolve the ``brew`` executable for this host."""
    found = dotfiles.runner.which("brew")
    if found:
        return found
    if env.is_linux:
        linuxbrew = linuxbrew_binary(env)
        if linuxbrew is not None:
            return str(linuxbrew)
    return "brew"


def setup_homebrew(
    env: Environment, cfg: HomebrewConfig, *, dry_run: bool = False
) -> None:
    """Install Homebrew if needed, then run ``brew bundle`` and fzf's installer."""
    dotfiles.console.title("Setting up Homebrew")

    if not dotfiles.runner.which("brew"):
        install_homebrew(cfg, dry_run=dry_run)

    brew = brew_command(env)
    if env.is_linux and brew != "brew":
        ensure_shellenv(env, pathlib.Path(brew), dry_run=dry_run)

    dotfiles.runner.run(
        [brew, "bundle", "--file", str(env.dotfiles / cfg.brewfile)],
        dry_run=dry_run,
    )

    print()
    dotfiles.console.info("Installing fzf")
    prefix = dotfiles.runner.output([brew, "--prefix"]) or "/opt/homebrew"
    fzf_install = pathlib.Path(prefix) / "opt" / "fzf" / "install"
    dotfiles.runner.run([str(fzf_install), *cfg.fzf_flags], dry_run=dry_run)
