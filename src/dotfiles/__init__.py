"""Installer for a personal dotfiles repository."""
