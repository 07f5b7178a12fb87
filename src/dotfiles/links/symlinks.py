"""Create, remove, and inspect the symlinks that install the dotfiles.

Every mutation is existence-checked: a pre-existing target is never
overwritten and only symlinks that point back into the dotfiles root are
ever removed, so ``link`` and ``clean`` can be repeated safely.
"""

from __future__ import annotations

import logging
import pathlib
import shutil
from typing import TYPE_CHECKING

import dotfiles.console
from dotfiles.links.report import LinkReport

if TYPE_CHECKING:
    from dotfiles.env import Environment
    from dotfiles.links.config import LinksConfig

logger = logging.getLogger("dotfiles.links")


def _lexists(path: pathlib.Path) -> bool:
    """``exists()`` that is also true for dangling symlinks."""
    return path.is_symlink() or path.exists()


def config_entries(
    env: Environment, *, dirs_only: bool = False
) -> list[pathlib.Path]:
    """Top-level entries of ``<dotfiles>/config``, sorted by name."""
    if not env.config_dir.is_dir():
        return []
    return sorted(
        p for p in env.config_dir.iterdir() if not dirs_only or p.is_dir()
    )


def home_links(env: Environment, cfg: LinksConfig) -> list[tuple[pathlib.Path, pathlib.Path]]:
    """``(target, source)`` pairs for the linkables placed in ``$HOME``."""
    return [
        (env.home / pathlib.PurePath(item).name, env.config_dir / item)
        for item in cfg.linkables
    ]


def managed_targets(env: Environment, cfg: LinksConfig) -> list[pathlib.Path]:
    """Every path ``setup_symlinks`` may create, in creation order."""
    targets = [target for target, _ in home_links(env, cfg)]
    targets.extend(env.config_home / entry.name for entry in config_entries(env))
    targets.append(env.home / ".zshenv")
    targets.append(env.home / "bin")
    return targets


def _ensure_dir(path: pathlib.Path, *, dry_run: bool) -> None:
    if path.is_dir():
        return
    if dry_run:
        dotfiles.console.dry_run(f"Would create {path}")
        return
    dotfiles.console.info(f"Creating {path}")
    path.mkdir(parents=True, exist_ok=True)


def _link_one(
    env: Environment,
    target: pathlib.Path,
    source: pathlib.Path,
    report: LinkReport,
    *,
    dry_run: bool,
) -> None:
    if _lexists(target):
        dotfiles.console.info(f"{env.display(target)} already exists... Skipping.")
        report.skipped.append(target)
        return
    if not _lexists(source):
        msg = f"Source {source} does not exist, not linking {env.display(target)}"
        dotfiles.console.warning(msg)
        report.warnings.append(msg)
        report.skipped.append(target)
        return
    if dry_run:
        dotfiles.console.dry_run(f"Would symlink {target} -> {source}")
        report.created.append(target)
        return
    dotfiles.console.info(f"Creating symlink for {source}")
    target.symlink_to(source)
    logger.debug("linked %s -> %s", target, source)
    report.created.append(target)


def _link_bin(
    env: Environment, cfg: LinksConfig, report: LinkReport, *, dry_run: bool
) -> None:
    source = env.dotfiles / cfg.bin_dir
    target = env.home / "bin"

    print()
    dotfiles.console.info(f"Creating symlink for /{cfg.bin_dir} folder...")
    if not source.is_dir():
        msg = f"Source directory does not exist: {source}"
        dotfiles.console.error(msg)
        report.errors.append(msg)
        return

    if target.is_symlink():
        dotfiles.console.info(f"Symlink already exists at {target} - Skipping.")
        report.skipped.append(target)
        return
    if target.exists():
        msg = f"Target path exists but is not a symlink: {target}"
        dotfiles.console.error(msg)
        report.errors.append(msg)
        return

    if dry_run:
        dotfiles.console.dry_run(f"Would symlink {target} -> {source}")
        report.created.append(target)
        return
    try:
        target.symlink_to(source)
    except OSError as exc:
        msg = f"Failed to create symlink: {target} -> {source} ({exc})"
        dotfiles.console.error(msg)
        report.errors.append(msg)
        return
    print(f"Successfully created symlink: {target} -> {source}")
    report.created.append(target)


def setup_symlinks(
    env: Environment, cfg: LinksConfig, *, dry_run: bool = False
) -> LinkReport:
    """Symlink the dotfiles into ``$HOME`` and ``$XDG_CONFIG_HOME``."""
    dotfiles.console.title("Creating symlinks")
    report = LinkReport()

    for target, source in home_links(env, cfg):
        _link_one(env, target, source, report, dry_run=dry_run)

    print()
    dotfiles.console.info(f"installing to {env.config_home}")
    _ensure_dir(env.config_home, dry_run=dry_run)
    _ensure_dir(env.data_home, dry_run=dry_run)

    for entry in config_entries(env, dirs_only=True):
        _link_one(env, env.config_home / entry.name, entry, report, dry_run=dry_run)

    # zsh reads ~/.zshenv before anything under $ZDOTDIR
    _link_one(
        env,
        env.home / ".zshenv",
        env.config_dir / cfg.zshenv,
        report,
        dry_run=dry_run,
    )

    _link_bin(env, cfg, report, dry_run=dry_run)
    return report


def _clean_one(
    env: Environment, target: pathlib.Path, report: LinkReport, *, dry_run: bool
) -> None:
    if target.is_symlink():
        if not env.points_into_dotfiles(target):
            msg = f'Skipping "{target}" because it does not point into {env.dotfiles}'
            dotfiles.console.warning(msg)
            report.warnings.append(msg)
            report.skipped.append(target)
            return
        if dry_run:
            dotfiles.console.dry_run(f'Would remove "{target}"')
        else:
            dotfiles.console.info(f'Cleaning up "{target}"')
            target.unlink()
        report.removed.append(target)
    elif target.exists():
        msg = f'Skipping "{target}" because it is not a symlink'
        dotfiles.console.warning(msg)
        report.warnings.append(msg)
        report.skipped.append(target)
    else:
        msg = f'Skipping "{target}" because it does not exist'
        dotfiles.console.warning(msg)
        report.warnings.append(msg)


def cleanup_symlinks(
    env: Environment, cfg: LinksConfig, *, dry_run: bool = False
) -> LinkReport:
    """Remove the symlinks ``setup_symlinks`` created; leave real files alone."""
    dotfiles.console.title("Cleaning up symlinks")
    report = LinkReport()
    for target in managed_targets(env, cfg):
        _clean_one(env, target, report, dry_run=dry_run)
    return report


def copy_configs(env: Environment, *, dry_run: bool = False) -> LinkReport:
    """Copy top-level ``config/`` entries into ``$XDG_CONFIG_HOME`` as real files."""
    report = LinkReport()
    _ensure_dir(env.config_home, dry_run=dry_run)
    _ensure_dir(env.data_home, dry_run=dry_run)

    for entry in config_entries(env):
        target = env.config_home / entry.name
        if target.is_symlink():
            msg = f'Skipping "{target}" because it is a symlink'
            dotfiles.console.warning(msg)
            report.warnings.append(msg)
            report.skipped.append(target)
            continue
        if target.exists() and entry.is_dir() != target.is_dir():
            kind = "directory" if entry.is_dir() else "file"
            msg = (
                f'Skipping "{target}" because it is in the way of the '
                f"{kind} {entry}"
            )
            dotfiles.console.warning(msg)
            report.warnings.append(msg)
            report.skipped.append(target)
            continue
        if dry_run:
            dotfiles.console.dry_run(f"Would copy {entry} to {target}")
            report.copied.append(target)
            continue
        dotfiles.console.info(f"copying {entry} to {target}")
        if entry.is_dir():
            shutil.copytree(entry, target, symlinks=True, dirs_exist_ok=True)
        else:
            shutil.copy2(entry, target)
        report.copied.append(target)
    return report


def link_status(
    env: Environment, cfg: LinksConfig
) -> list[tuple[pathlib.Path, str]]:
    """Classify each managed target.

    States: ``linked`` (symlink into the dotfiles root), ``foreign-link``
    (symlink elsewhere), ``file`` (real file or directory), ``missing``.
    """
    states: list[tuple[pathlib.Path, str]] = []
    for target in managed_targets(env, cfg):
        if target.is_symlink():
            state = "linked" if env.points_into_dotfiles(target) else "foreign-link"
        elif target.exists():
            state = "file"
        else:
            state = "missing"
        states.append((target, state))
    return states
