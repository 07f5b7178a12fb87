"""Back up existing dotfiles before they are replaced by symlinks."""

from __future__ import annotations

import datetime
import filecmp
import logging
import pathlib
import shutil
from typing import TYPE_CHECKING

import dotfiles.console
from dotfiles.links.report import LinkReport

if TYPE_CHECKING:
    from dotfiles.env import Environment
    from dotfiles.links.config import LinksConfig

logger = logging.getLogger("dotfiles.backup")


def backup_candidates(env: Environment, cfg: LinksConfig) -> list[pathlib.Path]:
    """Paths in ``$HOME`` that ``backup`` considers, in order."""
    paths = [env.home / pathlib.PurePath(item).name for item in cfg.linkables]
    paths.extend(env.home / extra for extra in cfg.backup_extra)
    return paths


def _trees_match(cmp: filecmp.dircmp) -> bool:
    if cmp.left_only or cmp.right_only or cmp.funny_files:
        return False
    _, mismatch, errors = filecmp.cmpfiles(
        cmp.left, cmp.right, cmp.common_files, shallow=False
    )
    if mismatch or errors:
        return False
    return all(_trees_match(sub) for sub in cmp.subdirs.values())


def same_contents(source: pathlib.Path, dest: pathlib.Path) -> bool:
    """True when *dest* is an exact copy of *source* (file or directory tree)."""
    if dest.is_symlink() or source.is_dir() != dest.is_dir():
        return False
    if source.is_dir():
        return _trees_match(filecmp.dircmp(source, dest))
    return filecmp.cmp(source, dest, shallow=False)


def _keep_previous(dest: pathlib.Path) -> pathlib.Path:
    """Rename an outdated backup entry to ``<name>.<timestamp>``."""
    stamp = datetime.datetime.now().strftime("%Y%m%d%H%M%S")
    kept = dest.with_name(f"{dest.name}.{stamp}")
    n = 1
    while kept.exists() or kept.is_symlink():
        kept = dest.with_name(f"{dest.name}.{stamp}.{n}")
        n += 1
    dest.rename(kept)
    return kept


def _copy_into(source: pathlib.Path, dest: pathlib.Path) -> None:
    if source.is_dir():
        shutil.copytree(source, dest, symlinks=True)
    else:
        shutil.copy2(source, dest)


def backup(env: Environment, cfg: LinksConfig, *, dry_run: bool = False) -> LinkReport:
    """Copy real (non-symlink) dotfiles into ``~/<backup_dir>``.

    An entry that is already backed up with the same contents is left as
    is.  When the contents differ, the old entry is renamed with a
    timestamp suffix before the new copy is made, so no earlier backup is
    ever overwritten.
    """
    report = LinkReport()
    backup_dir = env.home / cfg.backup_dir

    print(f"Creating backup directory at {backup_dir}")
    if dry_run:
        dotfiles.console.dry_run(f"Would create {backup_dir}")
    else:
        backup_dir.mkdir(parents=True, exist_ok=True)

    for path in backup_candidates(env, cfg):
        if path.is_symlink() or not path.exists():
            msg = f"{path.name} does not exist at this location or is a symlink"
            dotfiles.console.warning(msg)
            report.warnings.append(msg)
            report.skipped.append(path)
            continue

        dest = backup_dir / path.name
        present = dest.exists() or dest.is_symlink()
        if present and same_contents(path, dest):
            logger.debug("%s is already backed up at %s", path, dest)
            report.skipped.append(dest)
            continue
        if dry_run:
            if present:
                dotfiles.console.dry_run(f"Would keep the previous {dest} aside")
            dotfiles.console.dry_run(f"Would back up {path}")
            report.copied.append(dest)
            continue
        if present:
            kept = _keep_previous(dest)
            msg = (
                f"{path.name} changed since the last backup; "
                f"previous copy kept as {kept.name}"
            )
            dotfiles.console.warning(msg)
            report.warnings.append(msg)
        print(f"backing up {path.name}")
        _copy_into(path, dest)
        logger.debug("backed up %s to %s", path, dest)
        report.copied.append(dest)
    return report
