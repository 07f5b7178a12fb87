"""Thin wrapper around :mod:`subprocess` for installer steps."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from typing import TYPE_CHECKING

import dotfiles.console

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger("dotfiles.runner")


def which(name: str) -> str | None:
    return shutil.which(name)


def run(
    argv: Sequence[str],
    *,
    dry_run: bool = False,
    check: bool = True,
    input: str | None = None,
    capture: bool = False,
    quiet: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run *argv* and return the completed process.

    With ``check=True`` a non-zero exit raises
    :class:`subprocess.CalledProcessError`.  In dry-run mode nothing is
    executed and a successful empty result is returned.
    """
    cmd = [str(a) for a in argv]
    printable = shlex.join(cmd)
    if dry_run:
        dotfiles.console.dry_run(f"Would run: {printable}")
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    logger.debug("$ %s", printable)
    if capture:
        stdout = stderr = subprocess.PIPE
    elif quiet:
        stdout = stderr = subprocess.DEVNULL
    else:
        stdout = stderr = None
    return subprocess.run(
        cmd,
        check=check,
        input=input,
        text=True,
        stdout=stdout,
        stderr=stderr,
    )


def output(argv: Sequence[str]) -> str:
    """Return the stripped stdout of *argv*, or ``""`` if it cannot run."""
    try:
        result = run(argv, check=False, capture=True)
    except OSError:
        logger.debug("could not execute %s", argv[0])
        return ""
    if result.returncode != 0:
        return ""
    return (result.stdout or "").strip()
