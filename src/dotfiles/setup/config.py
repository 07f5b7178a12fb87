"""Configuration for host setup steps."""

from __future__ import annotations

import dataclasses

import dotfiles.config


@dotfiles.config.configurable("homebrew")
@dataclasses.dataclass
class HomebrewConfig:
    install_url: str = (
        "https://raw.githubusercontent.com/Homebrew/install/master/install.sh"
    )
    brewfile: str = "Brewfile"
    fzf_flags: list[str] = dataclasses.field(
        default_factory=lambda: [
            "--key-bindings",
            "--completion",
            "--no-update-rc",
            "--no-bash",
            "--no-fish",
        ]
    )
    download_timeout: float = 30.0


@dotfiles.config.configurable("git")
@dataclasses.dataclass
class GitConfig:
    local_config: str = ".gitconfig-local"
    # Seconds; used for the non-macOS "cache" credential helper
    cache_timeout: int = 3600


@dotfiles.config.configurable("macos")
@dataclasses.dataclass
class MacosConfig:
    restart_apps: list[str] = dataclasses.field(
        default_factory=lambda: ["Safari", "Finder", "Dock", "Mail", "SystemUIServer"]
    )
