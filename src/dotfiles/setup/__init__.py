"""One-time host setup steps (git, Homebrew, login shell, macOS)."""
