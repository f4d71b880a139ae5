"""Shared constants for the Outlook REST object model.

Config roots, credential paths, Graph endpoints and HTTP timeouts.
"""

from __future__ import annotations

import os
from typing import List, Tuple

# -----------------------------------------------------------------------------
# Config and credential paths
# -----------------------------------------------------------------------------

INI_SECTION = "outlook_rest"


def _config_roots() -> List[str]:
    """Return ordered list of config root directories."""
    roots: List[str] = []
    env_cfg = os.environ.get("CREDENTIALS")
    if env_cfg:
        roots.append(os.path.expanduser(os.path.dirname(env_cfg)))
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        roots.append(os.path.expanduser(xdg))
    roots.append(os.path.expanduser("~/.config"))
    return roots


def credential_ini_paths() -> List[str]:
    """Return ordered list of credentials.ini paths to search."""
    paths: List[str] = []

    # Environment override first
    env_creds = os.environ.get("CREDENTIALS")
    if env_creds:
        paths.append(os.path.expanduser(env_creds))

    for root in _config_roots():
        paths.append(os.path.join(root, "credentials.ini"))
        paths.append(os.path.join(root, INI_SECTION, "credentials.ini"))

    # Dedupe while preserving order
    seen: set[str] = set()
    unique: List[str] = []
    for p in paths:
        if p and p not in seen:
            seen.add(p)
            unique.append(p)
    return unique


def default_token_path() -> str:
    return os.path.join(_config_roots()[0], INI_SECTION, "token.json")


# -----------------------------------------------------------------------------
# Microsoft Graph API
# -----------------------------------------------------------------------------

GRAPH_API_URL = "https://graph.microsoft.com/v1.0"

GRAPH_API_SCOPES = [
    "Mail.ReadWrite",
    "MailboxSettings.ReadWrite",
    "Calendars.ReadWrite",
    "Contacts.ReadWrite",
    "Tasks.ReadWrite",
]

DEFAULT_TENANT = "consumers"

# -----------------------------------------------------------------------------
# HTTP and timeouts
# -----------------------------------------------------------------------------

# Default timeout for HTTP requests: (connect_seconds, read_seconds)
DEFAULT_REQUEST_TIMEOUT: Tuple[int, int] = (10, 30)

DEFAULT_PAGE_SIZE = 50
