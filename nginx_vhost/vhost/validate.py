"""
Validation of normalized vhost parameters.
"""

import posixpath
from typing import List

from nginx_vhost.core.resource import Platform
from nginx_vhost.errors import ConfigurationError
from nginx_vhost.logging import get_logger
from nginx_vhost.vhost.osfamily import enable_link_for
from nginx_vhost.vhost.params import NormalizedVhost

logger = get_logger(__name__)

ENSURE_STATES = ("present", "absent")


def validate(vhost: NormalizedVhost, platform: Platform) -> List[str]:
    """
    Check a vhost before any resource is declared.

    Returns:
        Non-fatal warnings (already logged)

    Raises:
        ConfigurationError: If the definition cannot be rendered
    """
    if not vhost.name or "/" in vhost.name:
        raise ConfigurationError(f"Invalid vhost name: {vhost.name!r}")

    if vhost.ensure not in ENSURE_STATES:
        raise ConfigurationError(
            f"{vhost.name}: ensure must be one of {', '.join(ENSURE_STATES)}, got {vhost.ensure!r}"
        )

    if vhost.ssl and (not vhost.ssl_cert or not vhost.ssl_key):
        raise ConfigurationError(
            f"{vhost.name}: ssl_cert and ssl_key must be set when ssl is enabled"
        )

    link = enable_link_for(platform, vhost)
    if link is not None and posixpath.normpath(link.path) == posixpath.normpath(link.target):
        raise ConfigurationError(
            f"{vhost.name}: enable link {link.path} would replace the config file it points to"
        )

    warnings = []

    # Heuristic only: a global address on some interface, not kernel support
    if vhost.ipv6_enable and not platform.has_ipv6:
        warnings.append(
            f"{vhost.name}: IPv6 support is not enabled or configured properly on this host"
        )

    for warning in warnings:
        logger.warning(warning)

    return warnings
