"""Tests for links.backup: copying existing dotfiles aside."""

from __future__ import annotations

import pathlib

import dotfiles.links.backup
import dotfiles.links.symlinks


def _snapshot(root: pathlib.Path) -> dict[str, bytes]:
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


class TestBackup:
    def test_copies_real_dotfiles(self, env, links_cfg):
        (env.home / ".gitconfig").write_text("[user]\n  name = me\n")
        vim = env.home / ".vim"
        (vim / "colors").mkdir(parents=True)
        (vim / "colors" / "dark.vim").write_text("hi Normal\n")

        report = dotfiles.links.backup.backup(env, links_cfg)

        backup_dir = env.home / "dotfiles-backup"
        assert (backup_dir / ".gitconfig").read_text() == "[user]\n  name = me\n"
        assert (backup_dir / ".vim" / "colors" / "dark.vim").exists()
        assert backup_dir / ".gitconfig" in report.copied

    def test_nested_extra_lands_by_name(self, env, links_cfg):
        nvim = env.config_home / "nvim"
        nvim.mkdir(parents=True)
        (nvim / "init.lua").write_text("-- old\n")

        dotfiles.links.backup.backup(env, links_cfg)

        assert (env.home / "dotfiles-backup" / "nvim" / "init.lua").exists()

    def test_skips_symlinks_and_missing(self, env, links_cfg, capsys):
        dotfiles.links.symlinks.setup_symlinks(env, links_cfg)
        capsys.readouterr()

        report = dotfiles.links.backup.backup(env, links_cfg)

        assert report.copied == []
        out = capsys.readouterr().out
        assert ".gitconfig does not exist at this location or is a symlink" in out
        assert ".vimrc does not exist at this location or is a symlink" in out
        assert list((env.home / "dotfiles-backup").iterdir()) == []

    def test_running_twice_gives_same_contents(self, env, links_cfg):
        (env.home / ".gitignore").write_text("*.swp\n")
        (env.home / ".vimrc").write_text("set nu\n")
        (env.home / ".vim").mkdir()
        (env.home / ".vim" / "plug.vim").write_text("call plug#begin()\n")
        backup_dir = env.home / "dotfiles-backup"

        dotfiles.links.backup.backup(env, links_cfg)
        first = _snapshot(backup_dir)
        dotfiles.links.backup.backup(env, links_cfg)

        assert _snapshot(backup_dir) == first
        assert first

    def test_dry_run_creates_nothing(self, env, links_cfg):
        (env.home / ".vimrc").write_text("set nu\n")

        report = dotfiles.links.backup.backup(env, links_cfg, dry_run=True)

        assert not (env.home / "dotfiles-backup").exists()
        assert report.copied == [env.home / "dotfiles-backup" / ".vimrc"]

    def test_custom_backup_dir(self, env, links_cfg):
        links_cfg.backup_dir = "old-dotfiles"
        (env.home / ".vimrc").write_text("set nu\n")

        dotfiles.links.backup.backup(env, links_cfg)

        assert (env.home / "old-dotfiles" / ".vimrc").exists()

    def test_unchanged_entry_is_not_copied_again(self, env, links_cfg):
        (env.home / ".vimrc").write_text("set nu\n")
        dotfiles.links.backup.backup(env, links_cfg)

        report = dotfiles.links.backup.backup(env, links_cfg)

        backup_dir = env.home / "dotfiles-backup"
        assert report.copied == []
        assert backup_dir / ".vimrc" in report.skipped
        assert sorted(p.name for p in backup_dir.iterdir()) == [".vimrc"]

    def test_changed_file_keeps_previous_backup(self, env, links_cfg, capsys):
        vimrc = env.home / ".vimrc"
        vimrc.write_text("set nu\n")
        dotfiles.links.backup.backup(env, links_cfg)
        vimrc.write_text("set rnu\n")

        report = dotfiles.links.backup.backup(env, links_cfg)

        backup_dir = env.home / "dotfiles-backup"
        assert (backup_dir / ".vimrc").read_text() == "set rnu\n"
        kept = [p for p in backup_dir.iterdir() if p.name.startswith(".vimrc.")]
        assert len(kept) == 1
        assert kept[0].read_text() == "set nu\n"
        assert "changed since the last backup" in capsys.readouterr().out
        assert report.warnings

    def test_changed_directory_keeps_previous_backup(self, env, links_cfg):
        vim = env.home / ".vim"
        vim.mkdir()
        (vim / "old.vim").write_text("old\n")
        dotfiles.links.backup.backup(env, links_cfg)
        (vim / "old.vim").unlink()
        (vim / "new.vim").write_text("new\n")

        dotfiles.links.backup.backup(env, links_cfg)

        backup_dir = env.home / "dotfiles-backup"
        assert sorted(p.name for p in (backup_dir / ".vim").iterdir()) == ["new.vim"]
        kept = [p for p in backup_dir.iterdir() if p.name.startswith(".vim.")]
        assert len(kept) == 1
        assert (kept[0] / "old.vim").read_text() == "old\n"

    def test_same_contents(self, tmp_path):
        a = tmp_path / "a"
        b = tmp_path / "b"
        for root in (a, b):
            (root / "sub").mkdir(parents=True)
            (root / "sub" / "f").write_text("x\n")
        assert dotfiles.links.backup.same_contents(a, b)
        (b / "sub" / "f").write_text("y\n")
        assert not dotfiles.links.backup.same_contents(a, b)
