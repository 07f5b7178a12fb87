"""Host environment the installer operates on.

Resolves the dotfiles root and the XDG base directories once so every
operation works from the same set of paths.  Tests build an
``Environment`` pointing at a scratch home instead of the real one.
"""

from __future__ import annotations

import dataclasses
import os
import pathlib
import platform
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


def _dir_from(environ: Mapping[str, str], key: str, fallback: pathlib.Path) -> pathlib.Path:
    value = environ.get(key, "")
    if value:
        return pathlib.Path(value).expanduser()
    return fallback


@dataclasses.dataclass(frozen=True)
class Environment:
    home: pathlib.Path
    dotfiles: pathlib.Path
    config_home: pathlib.Path
    data_home: pathlib.Path
    system: str = ""
    shell: str = ""

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        system: str | None = None,
    ) -> Environment:
        """Build an environment from *environ* (defaults to ``os.environ``)."""
        if environ is None:
            environ = os.environ
        home_value = environ.get("HOME", "")
        home = pathlib.Path(home_value) if home_value else pathlib.Path.home()
        dotfiles_value = environ.get("DOTFILES", "")
        # Symlink targets are built from this, so it must be absolute.
        dotfiles = (
            pathlib.Path(dotfiles_value).expanduser().resolve()
            if dotfiles_value
            else pathlib.Path.cwd()
        )
        return cls(
            home=home,
            dotfiles=dotfiles,
            config_home=_dir_from(environ, "XDG_CONFIG_HOME", home / ".config"),
            data_home=_dir_from(environ, "XDG_DATA_HOME", home / ".local" / "share"),
            system=system if system is not None else platform.system(),
            shell=environ.get("SHELL", ""),
        )

    @property
    def config_dir(self) -> pathlib.Path:
        return self.dotfiles / "config"

    @property
    def is_macos(self) -> bool:
        return self.system == "Darwin"

    @property
    def is_linux(self) -> bool:
        return self.system == "Linux"

    def display(self, path: pathlib.Path) -> str:
        """Render *path* with ``~`` in place of the home directory."""
        try:
            rel = path.relative_to(self.home)
        except ValueError:
            return str(path)
        return f"~/{rel}" if str(rel) != "." else "~"

    def points_into_dotfiles(self, link: pathlib.Path) -> bool:
        """Return True if symlink *link* targets something in the dotfiles root."""
        target = pathlib.Path(os.readlink(link))
        if not target.is_absolute():
            target = link.parent / target
        root = os.path.abspath(self.dotfiles)
        resolved = os.path.abspath(target)
        return resolved == root or resolved.startswith(root + os.sep)
