"""Configuration for symlink, copy, and backup commands."""

from __future__ import annotations

import dataclasses

import dotfiles.config


@dotfiles.config.configurable("links")
@dataclasses.dataclass
class LinksConfig:
    # Paths under config/, linked into $HOME by basename
    linkables: list[str] = dataclasses.field(
        default_factory=lambda: [
            "git/.gitconfig",
            "git/.gitignore",
            "git/gitmessage.txt",
        ]
    )
    zshenv: str = "zsh/.zshenv"
    bin_dir: str = "bin"

    # Backups land in $HOME/<backup_dir>
    backup_dir: str = "dotfiles-backup"
    backup_extra: list[str] = dataclasses.field(
        default_factory=lambda: [".config/nvim", ".vim", ".vimrc"]
    )
