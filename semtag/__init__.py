"""Next-version engine for git repositories and nx monorepos."""

__version__ = "0.1.0"
