"""Tests for setup.homebrew: installer download, bundle, fzf, shellenv."""

from __future__ import annotations

import httpx
import pytest

import dotfiles.runner
import dotfiles.setup.config
import dotfiles.setup.homebrew


@pytest.fixture
def brew_cfg() -> dotfiles.setup.config.HomebrewConfig:
    return dotfiles.setup.config.HomebrewConfig()


class _Resp:
    def __init__(self, text: str = "", status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            request = httpx.Request("GET", "https://example.invalid")
            raise httpx.HTTPStatusError(
                "boom",
                request=request,
                response=httpx.Response(self.status_code, request=request),
            )


class TestFetchInstaller:
    def test_returns_script_text(self, brew_cfg, monkeypatch):
        seen: dict[str, object] = {}

        def _get(url, **kwargs):
            seen["url"] = url
            seen.update(kwargs)
            return _Resp("#!/bin/bash\necho brew\n")

        monkeypatch.setattr(httpx, "get", _get)

        script = dotfiles.setup.homebrew.fetch_installer(brew_cfg)

        assert script.startswith("#!/bin/bash")
        assert seen["url"] == brew_cfg.install_url
        assert seen["follow_redirects"] is True

    def test_http_error_propagates(self, brew_cfg, monkeypatch):
        monkeypatch.setattr(httpx, "get", lambda url, **kw: _Resp(status_code=404))
        with pytest.raises(httpx.HTTPStatusError):
            dotfiles.setup.homebrew.fetch_installer(brew_cfg)


class TestSetupHomebrew:
    def test_existing_brew_runs_bundle_and_fzf(
        self, macos_env, brew_cfg, fake_runner, monkeypatch
    ):
        monkeypatch.setattr(
            dotfiles.runner,
            "which",
            lambda name: "/opt/homebrew/bin/brew" if name == "brew" else None,
        )
        fake_runner.outputs[("/opt/homebrew/bin/brew", "--prefix")] = "/opt/homebrew"

        dotfiles.setup.homebrew.setup_homebrew(macos_env, brew_cfg)

        argvs = [argv for argv, _ in fake_runner]
        assert argvs[0] == [
            "/opt/homebrew/bin/brew",
            "bundle",
            "--file",
            str(macos_env.dotfiles / "Brewfile"),
        ]
        assert argvs[1] == [
            "/opt/homebrew/opt/fzf/install",
            "--key-bindings",
            "--completion",
            "--no-update-rc",
            "--no-bash",
            "--no-fish",
        ]

    def test_missing_brew_downloads_installer(
        self, macos_env, brew_cfg, fake_runner, monkeypatch
    ):
        monkeypatch.setattr(
            dotfiles.setup.homebrew, "fetch_installer", lambda cfg: "echo install\n"
        )

        dotfiles.setup.homebrew.setup_homebrew(macos_env, brew_cfg)

        argv, kwargs = fake_runner[0]
        assert argv == ["bash", "--login"]
        assert kwargs["input"] == "echo install\n"
        assert fake_runner[1][0][:2] == ["brew", "bundle"]

    def test_dry_run_does_not_download(
        self, macos_env, brew_cfg, fake_runner, monkeypatch, capsys
    ):
        def _boom(cfg):
            raise AssertionError("should not download in dry-run")

        monkeypatch.setattr(dotfiles.setup.homebrew, "fetch_installer", _boom)

        dotfiles.setup.homebrew.setup_homebrew(macos_env, brew_cfg, dry_run=True)

        assert "[dry-run]" in capsys.readouterr().out
        assert all(kwargs.get("dry_run") is True for _, kwargs in fake_runner)

    def test_linux_adds_shellenv_to_profile(
        self, env, brew_cfg, fake_runner, monkeypatch
    ):
        monkeypatch.setattr(
            dotfiles.setup.homebrew, "fetch_installer", lambda cfg: "echo install\n"
        )
        brew = env.home / ".linuxbrew" / "bin" / "brew"
        brew.parent.mkdir(parents=True)
        brew.write_text("")
        (env.home / ".bash_profile").write_text("export A=1")

        # which() finds nothing, but the installer left brew in ~/.linuxbrew
        dotfiles.setup.homebrew.setup_homebrew(env, brew_cfg)

        profile = (env.home / ".bash_profile").read_text()
        assert profile == f'export A=1\neval "$({brew} shellenv)"\n'
        assert [argv for argv, _ in fake_runner][1][:2] == [str(brew), "bundle"]


class TestEnsureShellenv:
    def test_appends_once(self, env, tmp_path):
        profile = env.home / ".bash_profile"
        profile.write_text("")
        brew = tmp_path / "brew"

        assert dotfiles.setup.homebrew.ensure_shellenv(env, brew) is True
        assert dotfiles.setup.homebrew.ensure_shellenv(env, brew) is False
        assert profile.read_text().count("shellenv") == 1

    def test_no_profile(self, env, tmp_path):
        assert dotfiles.setup.homebrew.ensure_shellenv(env, tmp_path / "brew") is False
        assert not (env.home / ".bash_profile").exists()


class TestLinuxbrewBinary:
    def test_finds_home_install(self, env):
        brew = env.home / ".linuxbrew" / "bin" / "brew"
        brew.parent.mkdir(parents=True)
        brew.write_text("")
        assert dotfiles.setup.homebrew.linuxbrew_binary(env) == brew
