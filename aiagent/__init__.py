"""
aiagent package

This package implements a CLI that bootstraps a project from a one-line idea.

Key responsibilities are split across modules:
- `transport.py`: the single "send request, read body, classify status" seam
- `github_client.py`: isolated GitHub REST API interactions (repos, issues, git data)
- `commits.py`: commit files to a branch that may or may not have history yet
- `openai_client.py`: chat-completion calls (task breakdown, README text)
- `issues.py`: render tasks into issue bodies and file them
- `cli.py`: CLI entrypoint and orchestration (repo -> tasks -> issues -> README)
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
