"""Resolve client id, tenant and token path for the service.

Resolution order: explicit argument > environment > credentials.ini profile
section > defaults. INI sections are ``[outlook_rest]`` and
``[outlook_rest.<profile>]``.
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from typing import Dict, Optional

from .constants import DEFAULT_TENANT, INI_SECTION, credential_ini_paths, default_token_path
from .errors import ConfigError

ENV_CLIENT_ID = "OUTLOOK_REST_CLIENT_ID"
ENV_TENANT = "OUTLOOK_REST_TENANT"
ENV_TOKEN = "OUTLOOK_REST_TOKEN"
ENV_PROFILE = "OUTLOOK_REST_PROFILE"


@dataclass
class ServiceSettings:
    """Resolved connection settings."""

    client_id: str
    tenant: str = DEFAULT_TENANT
    token_path: Optional[str] = None
    profile: Optional[str] = None


def expand_path(path: Optional[str]) -> Optional[str]:
    if not path:
        return path
    return os.path.expanduser(path)


def _read_ini() -> Dict[str, Dict[str, str]]:
    merged_sections: Dict[str, Dict[str, str]] = {}
    # Earlier paths win; later ones only fill missing keys
    for p in credential_ini_paths():
        if not os.path.exists(p):
            continue
        cp = configparser.ConfigParser()
        try:
            cp.read(p)
        except configparser.Error:
            continue
        for section in cp.sections():
            sec = merged_sections.setdefault(section, {})
            for k, v in cp.items(section):
                sec.setdefault(k, v)
    return merged_sections


def _get_ini_section(profile: Optional[str]) -> Dict[str, str]:
    ini = _read_ini()
    base = dict(ini.get(INI_SECTION, {}))
    if profile:
        base.update(ini.get(f"{INI_SECTION}.{profile}", {}))
    return base


def resolve_settings(
    profile: Optional[str] = None,
    client_id: Optional[str] = None,
    tenant: Optional[str] = None,
    token_path: Optional[str] = None,
) -> ServiceSettings:
    """Fold arguments over environment, INI and defaults.

    Raises ConfigError when no client id can be found.
    """
    profile = profile or os.environ.get(ENV_PROFILE) or None
    sec = _get_ini_section(profile)
    resolved_client = client_id or os.environ.get(ENV_CLIENT_ID) or sec.get("client_id")
    if not resolved_client:
        raise ConfigError(
            "No Outlook client id configured.",
            f"Pass client_id, set {ENV_CLIENT_ID}, or add client_id to [{INI_SECTION}] in credentials.ini.",
        )
    resolved_tenant = tenant or os.environ.get(ENV_TENANT) or sec.get("tenant") or DEFAULT_TENANT
    resolved_token = (
        token_path or os.environ.get(ENV_TOKEN) or sec.get("token") or default_token_path()
    )
    return ServiceSettings(
        client_id=resolved_client,
        tenant=resolved_tenant,
        token_path=expand_path(resolved_token),
        profile=profile,
    )
