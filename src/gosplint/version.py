"""Version information with git commit tracking.

Reports the package version plus the commit hash when running from a git
checkout, so an editable install still says exactly which code is linting.
Git runs against this file's repo, not the caller's cwd.
"""

import os
import subprocess

PACKAGE_VERSION = "0.3.0"

_REPO_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _git_commit() -> str | None:
    """Return the short HEAD hash of the source repo, or None outside a checkout."""
    try:
        result = subprocess.run(
            ["git", "-C", _REPO_DIR, "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def get_version() -> str:
    """Return a version string like '0.3.0' or '0.3.0 (g3a7f2c1)'."""
    commit = _git_commit()
    if commit is None:
        return PACKAGE_VERSION
    return f"{PACKAGE_VERSION} (g{commit})"
