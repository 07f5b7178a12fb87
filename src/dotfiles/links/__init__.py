"""Symlink, copy, and backup management for the dotfiles tree."""
