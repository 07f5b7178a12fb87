"""Shared test fixtures for dotfiles tests."""

from __future__ import annotations

import pathlib

import pytest

import dotfiles.config
import dotfiles.env
import dotfiles.links.config


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch):
    """Keep tests away from the real global config and terminal colors."""
    global_toml = tmp_path / "global-config" / "dotfiles" / "config.toml"
    monkeypatch.setattr(dotfiles.config, "_global_path", lambda env: global_toml)
    monkeypatch.setenv("NO_COLOR", "1")


@pytest.fixture
def home(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def dotfiles_root(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create a small dotfiles checkout.

    config/git/{.gitconfig,.gitignore,gitmessage.txt}
    config/nvim/init.lua
    config/zsh/.zshenv
    config/starship.toml      (top-level file, never linked)
    bin/hello
    """
    root = tmp_path / "dotfiles"
    git = root / "config" / "git"
    git.mkdir(parents=True)
    (git / ".gitconfig").write_text("[include]\n  path = ~/.gitconfig-local\n")
    (git / ".gitignore").write_text(".DS_Store\n")
    (git / "gitmessage.txt").write_text("# subject\n")
    nvim = root / "config" / "nvim"
    nvim.mkdir()
    (nvim / "init.lua").write_text("vim.opt.number = true\n")
    zsh = root / "config" / "zsh"
    zsh.mkdir()
    (zsh / ".zshenv").write_text('export ZDOTDIR="$HOME/.config/zsh"\n')
    (root / "config" / "starship.toml").write_text('format = "$all"\n')
    bin_dir = root / "bin"
    bin_dir.mkdir()
    (bin_dir / "hello").write_text("#!/bin/sh\necho hello\n")
    return root


@pytest.fixture
def env(home: pathlib.Path, dotfiles_root: pathlib.Path) -> dotfiles.env.Environment:
    return dotfiles.env.Environment(
        home=home,
        dotfiles=dotfiles_root,
        config_home=home / ".config",
        data_home=home / ".local" / "share",
        system="Linux",
        shell="/bin/bash",
    )


@pytest.fixture
def macos_env(env: dotfiles.env.Environment) -> dotfiles.env.Environment:
    import dataclasses

    return dataclasses.replace(env, system="Darwin")


@pytest.fixture
def links_cfg() -> dotfiles.links.config.LinksConfig:
    return dotfiles.links.config.LinksConfig()


@pytest.fixture
def fake_runner(monkeypatch: pytest.MonkeyPatch):
    """Record ``dotfiles.runner.run`` calls instead of executing them.

    Returns the list of ``(argv, kwargs)`` tuples; ``output`` answers
    from the ``outputs`` dict attached to the list (empty string default).
    """
    import subprocess

    import dotfiles.runner

    class _Calls(list):
        outputs: dict[tuple[str, ...], str]

    calls = _Calls()
    calls.outputs = {}

    def _run(argv, **kwargs):
        calls.append((list(map(str, argv)), kwargs))
        return subprocess.CompletedProcess(list(argv), 0, stdout="", stderr="")

    def _output(argv):
        return calls.outputs.get(tuple(argv), "")

    monkeypatch.setattr(dotfiles.runner, "run", _run)
    monkeypatch.setattr(dotfiles.runner, "output", _output)
    monkeypatch.setattr(dotfiles.runner, "which", lambda name: None)
    return calls
