"""
Host-level settings shared by every vhost.

These used to be process-wide defaults; here they are an explicit object
handed to the evaluator. Precedence, lowest to highest: OS-family
defaults, NGINX_VHOST_* environment variables, values set in code or in
a config file.
"""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from nginx_vhost.core.resource import Platform
from nginx_vhost.vhost.osfamily import OSFamily, os_family

ENV_PREFIX = "NGINX_VHOST_"

_ENV_FIELDS = {
    "DAEMON_USER": "daemon_user",
    "DAEMON_GROUP": "daemon_group",
    "VDIR": "vdir",
    "VDIR_ENABLE": "vdir_enable",
    "LOG_DIR": "log_dir",
    "SERVICE": "service_name",
    "FASTCGI_UPSTREAM": "fastcgi_upstream",
}


@dataclass(frozen=True)
class Settings:
    """
    Attributes:
        daemon_user: Default owner of generated files
        daemon_group: Default group of generated files (daemon_user if unset)
        vdir: Directory holding vhost config files
        vdir_enable: Directory holding enable links (Debian family)
        log_dir: Directory for per-vhost access/error logs
        service_name: Service reloaded after changes
        fastcgi_upstream: fastcgi_pass target when fastcgi is just switched on
    """
    daemon_user: str = "www-data"
    daemon_group: Optional[str] = None
    vdir: str = "/etc/nginx/sites-available"
    vdir_enable: str = "/etc/nginx/sites-enabled"
    log_dir: str = "/var/log/nginx"
    service_name: str = "nginx"
    fastcgi_upstream: str = "127.0.0.1:9000"

    @property
    def default_group(self) -> str:
        return self.daemon_group or self.daemon_user

    @classmethod
    def for_platform(cls, platform: Platform) -> "Settings":
        """OS-family defaults."""
        if os_family(platform.distro) == OSFamily.DEBIAN:
            return cls()
        return cls(
            daemon_user="nginx",
            vdir="/etc/nginx/conf.d",
            vdir_enable="/etc/nginx/conf.d",
        )

    @classmethod
    def from_env(
        cls,
        platform: Platform,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Settings":
        """
        OS-family defaults overlaid with NGINX_VHOST_* variables.

        Example:
            NGINX_VHOST_VDIR=/tmp/sites nginx-vhost render site.py
        """
        environ = os.environ if environ is None else environ
        overrides = {
            attr: environ[ENV_PREFIX + key]
            for key, attr in _ENV_FIELDS.items()
            if environ.get(ENV_PREFIX + key)
        }
        return replace(cls.for_platform(platform), **overrides)
