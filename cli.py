"""Backwards-compatible shim that exposes the packaged Taskdown CLI."""

from taskdown.cli import app, main

__all__ = ["app", "main"]

if __name__ == "__main__":
    main()
