"""Installer settings with TOML-backed persistence.

Sections are dataclasses registered with ``@configurable``.  ``load()``
layers the user's global overrides and then the checkout's local
overrides on top of the dataclass defaults:

    $XDG_CONFIG_HOME/dotfiles/config.toml   global (every checkout)
    <dotfiles root>/.dotfiles/config.toml   local  (this checkout)

Both locations come from the same ``Environment`` the commands run
against, so ``DOTFILES=... dotfiles link`` and ``DOTFILES=... dotfiles
config set ...`` always agree on which files they read.
"""

from __future__ import annotations

import dataclasses
import pathlib
import tomllib
from typing import TYPE_CHECKING, Any

import dotfiles.env

if TYPE_CHECKING:
    from collections.abc import Callable

_REGISTRY: dict[str, type] = {}

SCOPES = ("local", "global")


def configurable(section: str):
    """Class decorator: register a dataclass under *section*."""

    def decorator(cls):
        _REGISTRY[section] = cls
        return cls

    return decorator


def sections() -> dict[str, type]:
    """Registered sections, sorted by name."""
    return dict(sorted(_REGISTRY.items()))


def _section(name: str) -> type:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise KeyError(f"Unknown config section: {name}") from None


def _global_path(env: dotfiles.env.Environment) -> pathlib.Path:
    return env.config_home / "dotfiles" / "config.toml"


def _local_path(env: dotfiles.env.Environment) -> pathlib.Path:
    return env.dotfiles / ".dotfiles" / "config.toml"


def path_for(env: dotfiles.env.Environment, scope: str = "local") -> pathlib.Path:
    """The TOML file that holds *scope* overrides for *env*."""
    if scope not in SCOPES:
        raise ValueError(f"Unknown scope: {scope}")
    return _global_path(env) if scope == "global" else _local_path(env)


def _read(path: pathlib.Path) -> dict[str, Any]:
    # Missing and malformed files both read as empty.
    try:
        return tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def _write(path: pathlib.Path, data: dict[str, Any]) -> None:
    import tomli_w

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(tomli_w.dumps(data).encode())


def overrides(
    section: str, env: dotfiles.env.Environment, scope: str
) -> dict[str, Any]:
    """Keys of *section* set in the *scope* file, as stored."""
    return _read(path_for(env, scope)).get(section, {})


def load(section: str, env: dotfiles.env.Environment | None = None) -> Any:
    """Build the *section* dataclass with global and local overrides applied."""
    cls = _section(section)
    if env is None:
        env = dotfiles.env.Environment.from_environ()

    merged: dict[str, Any] = {}
    for scope in ("global", "local"):
        merged.update(overrides(section, env, scope))

    known = {f.name for f in dataclasses.fields(cls)}
    return cls(**{k: v for k, v in merged.items() if k in known})


# ---------------------------------------------------------------------------
# Parsing values typed on the command line
# ---------------------------------------------------------------------------

def _parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in ("true", "yes", "1", "on"):
        return True
    if lowered in ("false", "no", "0", "off"):
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _parse_list(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


_PARSERS: dict[str, Callable[[str], Any]] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": _parse_bool,
    "list": _parse_list,
    "list[str]": _parse_list,
}


def _field(cls: type, key: str) -> dataclasses.Field:
    for f in dataclasses.fields(cls):
        if f.name == key:
            return f
    raise KeyError(f"Unknown key: {key}")


def parse_value(section: str, key: str, raw: str) -> Any:
    """Convert the command-line string *raw* to the type of ``section.key``."""
    annotation = _field(_section(section), key).type
    if not isinstance(annotation, str):
        annotation = getattr(annotation, "__name__", str(annotation))
    return _PARSERS.get(annotation, str)(raw)


def set_value(
    section: str,
    key: str,
    value: Any,
    *,
    env: dotfiles.env.Environment | None = None,
    scope: str = "local",
) -> pathlib.Path:
    """Store an override and return the file it was written to.

    String values are parsed to the field's type first, so
    ``set_value("links", "backup_extra", ".vim,.vimrc")`` stores a list.
    """
    if isinstance(value, str):
        value = parse_value(section, key, value)
    else:
        _field(_section(section), key)
    if env is None:
        env = dotfiles.env.Environment.from_environ()

    path = path_for(env, scope)
    data = _read(path)
    data.setdefault(section, {})[key] = value
    _write(path, data)
    return path


def reset_value(
    section: str,
    key: str,
    *,
    env: dotfiles.env.Environment | None = None,
    scope: str = "local",
) -> bool:
    """Drop an override; return False when there was none to drop."""
    if env is None:
        env = dotfiles.env.Environment.from_environ()
    path = path_for(env, scope)
    data = _read(path)
    overrides = data.get(section, {})
    if key not in overrides:
        return False
    del overrides[key]
    if not overrides:
        del data[section]
    _write(path, data)
    return True
