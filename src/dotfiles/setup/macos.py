"""Apply macOS ``defaults`` preferences and restart affected apps."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

import dotfiles.console
import dotfiles.runner

if TYPE_CHECKING:
    from dotfiles.env import Environment
    from dotfiles.setup.config import MacosConfig

_LIST_VIEW_SETTINGS = (
    '{ "columns" = ( '
    '{ "ascending" = 1; "identifier" = "name"; "visible" = 1; "width" = 300; }, '
    '{ "ascending" = 0; "identifier" = "dateModified"; "visible" = 1; "width" = 181; }, '
    '{ "ascending" = 0; "identifier" = "size"; "visible" = 1; "width" = 97; } ); '
    '"iconSize" = 16; "showIconPreview" = 0; "sortColumn" = "name"; '
    '"textSize" = 12; "useRelativeDates" = 1; }'
)


@dataclasses.dataclass(frozen=True)
class Step:
    description: str
    commands: tuple[tuple[str, ...], ...]
    # Best-effort steps ignore non-zero exits
    check: bool = True


def _write(domain: str, key: str, *value: str) -> tuple[str, ...]:
    return ("defaults", "write", domain, key, *value)


def preference_steps(env: Environment) -> list[Step]:
    """The ordered list of preference changes."""
    home = str(env.home)
    return [
        Step(
            "Finder: show all filename extensions",
            (_write("NSGlobalDomain", "AppleShowAllExtensions", "-bool", "true"),),
        ),
        Step(
            "show hidden files by default",
            (_write("com.apple.Finder", "AppleShowAllFiles", "-bool", "true"),),
        ),
        Step(
            "only use UTF-8 in Terminal.app",
            (_write("com.apple.terminal", "StringEncodings", "-array", "4"),),
        ),
        Step(
            "expand save dialog by default",
            (
                _write(
                    "NSGlobalDomain",
                    "NSNavPanelExpandedStateForSaveMode",
                    "-bool",
                    "true",
                ),
            ),
        ),
        Step(
            "show the ~/Library folder in Finder",
            (("chflags", "nohidden", f"{home}/Library"),),
        ),
        Step(
            "Enable full keyboard access for all controls "
            "(e.g. enable Tab in modal dialogs)",
            (_write("NSGlobalDomain", "AppleKeyboardUIMode", "-int", "3"),),
        ),
        Step(
            "Enable subpixel font rendering on non-Apple LCDs",
            (_write("NSGlobalDomain", "AppleFontSmoothing", "-int", "2"),),
        ),
        Step(
            "Show Path bar in Finder",
            (_write("com.apple.finder", "ShowPathbar", "-bool", "true"),),
        ),
        Step(
            "Show Status bar in Finder",
            (_write("com.apple.finder", "ShowStatusBar", "-bool", "true"),),
        ),
        Step(
            "the default Finder view to list view",
            (_write("com.apple.finder", "FXPreferredViewStyle", "-string", "Nlsv"),),
        ),
        Step(
            "default list view settings for new folders",
            (
                _write(
                    "com.apple.finder",
                    "FK_StandardViewSettings",
                    "-dict-add",
                    "ListViewSettings",
                    _LIST_VIEW_SETTINGS,
                ),
            ),
        ),
        Step(
            "existing folder view settings to force use of default settings",
            (
                ("defaults", "delete", "com.apple.finder", "FXInfoPanesExpanded"),
                ("defaults", "delete", "com.apple.finder", "FXDesktopVolumePositions"),
            ),
            check=False,
        ),
        Step(
            "Set list view for all view types",
            (
                _write(
                    "com.apple.finder",
                    "FK_StandardViewSettings",
                    "-dict-add",
                    "ExtendedListViewSettings",
                    _LIST_VIEW_SETTINGS,
                ),
            ),
        ),
        Step(
            "default search scope to the current folder",
            (_write("com.apple.finder", "FXDefaultSearchScope", "-string", "SCcf"),),
        ),
        Step(
            "trash items older than 30 days",
            (_write("com.apple.finder", "FXRemoveOldTrashItems", "-bool", "true"),),
        ),
        Step(
            "Remove .DS_Store files to reset folder view settings",
            (("find", home, "-name", ".DS_Store", "-type", "f", "-delete"),),
            check=False,
        ),
        Step(
            "Show all filename extensions",
            (_write("NSGlobalDomain", "AppleShowAllExtensions", "-bool", "true"),),
        ),
        Step(
            "Enable Safari’s debug menu",
            (_write("com.apple.Safari", "IncludeInternalDebugMenu", "-bool", "true"),),
        ),
    ]


def setup_macos(
    env: Environment, cfg: MacosConfig, *, dry_run: bool = False
) -> bool:
    """Apply the preference steps on macOS.

    Returns False (after a warning) when the host is not macOS.
    """
    dotfiles.console.title("Configuring macOS")
    if not env.is_macos:
        dotfiles.console.warning("macOS not detected. Skipping.")
        return False

    for step in preference_steps(env):
        print(step.description)
        for argv in step.commands:
            dotfiles.runner.run(
                argv, dry_run=dry_run, check=step.check, quiet=not step.check
            )

    print("Kill affected applications")
    for app in cfg.restart_apps:
        dotfiles.runner.run(["killall", app], dry_run=dry_run, check=False, quiet=True)
    return True
