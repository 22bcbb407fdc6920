"""
OS-family dispatch for the sites-enabled symlink.

Debian-family hosts activate a vhost by linking it from the enabled
directory. Red Hat style hosts read conf.d directly, so there is
nothing to link.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional

from nginx_vhost.core.resource import Platform

if TYPE_CHECKING:
    from nginx_vhost.vhost.params import NormalizedVhost


class OSFamily(Enum):
    DEBIAN = "debian"
    REDHAT = "redhat"
    OTHER = "other"


_FAMILY_BY_DISTRO: Dict[str, OSFamily] = {
    "debian": OSFamily.DEBIAN,
    "ubuntu": OSFamily.DEBIAN,
    "mint": OSFamily.DEBIAN,
    "redhat": OSFamily.REDHAT,
    "rhel": OSFamily.REDHAT,
    "centos": OSFamily.REDHAT,
    "fedora": OSFamily.REDHAT,
    "rocky": OSFamily.REDHAT,
    "almalinux": OSFamily.REDHAT,
    "amzn": OSFamily.REDHAT,
}


def os_family(distro: str) -> OSFamily:
    """Map a distro id (as reported by Platform) to its family."""
    return _FAMILY_BY_DISTRO.get((distro or "").lower(), OSFamily.OTHER)


@dataclass(frozen=True)
class EnableLink:
    """Symlink in the enabled directory pointing at the real config file."""
    path: str
    target: str
    ensure: str


def _debian_link(vhost: "NormalizedVhost") -> Optional[EnableLink]:
    return EnableLink(path=vhost.enable_path, target=vhost.config_file, ensure=vhost.ensure)


def _no_link(vhost: "NormalizedVhost") -> Optional[EnableLink]:
    return None


ENABLE_POLICIES: Dict[OSFamily, Callable[["NormalizedVhost"], Optional[EnableLink]]] = {
    OSFamily.DEBIAN: _debian_link,
    OSFamily.REDHAT: _no_link,
    OSFamily.OTHER: _no_link,
}


def enable_link_for(platform: Platform, vhost: "NormalizedVhost") -> Optional[EnableLink]:
    """
    Return the enable link to manage for this vhost, if any.

    Args:
        platform: Detected (or configured) platform
        vhost: Normalized vhost parameters
    """
    return ENABLE_POLICIES[os_family(platform.distro)](vhost)
