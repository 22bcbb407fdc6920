"""
Vhost parameters and their normalization.

VhostParams is what a user writes; NormalizedVhost is what the rest of
the pipeline consumes: booleans coerced, owner/group resolved, paths
derived from Settings.
"""

import posixpath
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Union

from nginx_vhost.errors import ConfigurationError
from nginx_vhost.vhost.settings import Settings

DEFAULT_PROXY_HEADERS = [
    "Host $host",
    "X-Real-IP $remote_addr",
    "X-Forwarded-For $proxy_add_x_forwarded_for",
    "X-Forwarded-Proto $scheme",
]

DEFAULT_INDEX_FILES = ["index.html", "index.htm", "index.php"]

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0", ""}

BoolLike = Union[bool, str, int, None]


@dataclass
class VhostParams:
    """Raw parameters of one nginx virtual host."""
    name: str
    ensure: str = "present"
    listen_ip: str = "*"
    listen_port: Union[int, str] = 80
    ssl_listen_ip: str = "*"
    ssl_port: Union[int, str] = 443
    ipv6_enable: BoolLike = False
    ipv6_listen_ip: str = "::"
    ipv6_listen_port: Union[int, str] = 80
    default_server: BoolLike = False
    server_name: Union[List[str], str, None] = None
    ssl: BoolLike = False
    ssl_only: BoolLike = False
    ssl_cert: Optional[str] = None
    ssl_key: Optional[str] = None
    proxy: Optional[str] = None
    proxy_read_timeout: Union[int, str] = "90"
    proxy_set_header: List[str] = field(default_factory=lambda: list(DEFAULT_PROXY_HEADERS))
    proxy_redirect: Optional[str] = None
    redirect: Optional[str] = None
    index_files: List[str] = field(default_factory=lambda: list(DEFAULT_INDEX_FILES))
    www_root: Optional[str] = None
    create_www_root: BoolLike = False
    owner: Optional[str] = ""
    groupowner: Optional[str] = ""
    fastcgi: Union[bool, str, None] = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VhostParams":
        """
        Build params from a plain mapping (e.g. a config file entry).

        Raises:
            ConfigurationError: On unknown keys or a missing name
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown vhost parameter(s): {', '.join(unknown)}")
        if not data.get("name"):
            raise ConfigurationError("Vhost definition without a name")
        return cls(**data)


@dataclass
class NormalizedVhost:
    """Vhost with defaults resolved. Built by normalize()."""
    name: str
    ensure: str
    listen_ip: str
    listen_port: Union[int, str]
    ssl_listen_ip: str
    ssl_port: Union[int, str]
    ipv6_enable: bool
    ipv6_listen_ip: str
    ipv6_listen_port: Union[int, str]
    default_server: bool
    server_name: List[str]
    ssl: bool
    ssl_only: bool
    ssl_cert: Optional[str]
    ssl_key: Optional[str]
    proxy: Optional[str]
    proxy_read_timeout: Union[int, str]
    proxy_set_header: List[str]
    proxy_redirect: Optional[str]
    redirect: Optional[str]
    index_files: List[str]
    www_root: Optional[str]
    create_www_root: bool
    owner: str
    groupowner: str
    fastcgi_pass: Optional[str]
    config_file: str
    enable_path: str
    log_dir: str

    @property
    def present(self) -> bool:
        return self.ensure == "present"


def to_bool(value: BoolLike) -> bool:
    """
    Coerce a flag the way config files spell them.

    Example:
        to_bool("yes")  # True
        to_bool("false")  # False
        to_bool(None)  # False
    """
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return bool(value)


def _fastcgi_pass(value: Union[bool, str, None], settings: Settings) -> Optional[str]:
    """A flag enables the default upstream; any other string is the upstream itself."""
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered not in _TRUE_STRINGS | _FALSE_STRINGS:
            return value.strip()
    return settings.fastcgi_upstream if to_bool(value) else None


def _as_list(value: Union[List[str], str, None], default: List[str]) -> List[str]:
    if value is None or value == "" or value == []:
        return list(default)
    if isinstance(value, str):
        return [value]
    return list(value)


def normalize(params: VhostParams, settings: Settings) -> NormalizedVhost:
    """
    Resolve defaults and coerce flags. Never fails.
    """
    filename = f"{params.name}.conf"

    return NormalizedVhost(
        name=params.name,
        ensure=params.ensure,
        listen_ip=params.listen_ip,
        listen_port=params.listen_port,
        ssl_listen_ip=params.ssl_listen_ip,
        ssl_port=params.ssl_port,
        ipv6_enable=to_bool(params.ipv6_enable),
        ipv6_listen_ip=params.ipv6_listen_ip,
        ipv6_listen_port=params.ipv6_listen_port,
        default_server=to_bool(params.default_server),
        server_name=_as_list(params.server_name, [params.name]),
        ssl=to_bool(params.ssl),
        ssl_only=to_bool(params.ssl_only),
        ssl_cert=params.ssl_cert or None,
        ssl_key=params.ssl_key or None,
        proxy=params.proxy or None,
        proxy_read_timeout=params.proxy_read_timeout,
        proxy_set_header=list(params.proxy_set_header or []),
        proxy_redirect=params.proxy_redirect or None,
        redirect=params.redirect or None,
        index_files=_as_list(params.index_files, DEFAULT_INDEX_FILES),
        www_root=params.www_root or None,
        create_www_root=to_bool(params.create_www_root),
        owner=params.owner or settings.daemon_user,
        groupowner=params.groupowner or settings.default_group,
        fastcgi_pass=_fastcgi_pass(params.fastcgi, settings),
        config_file=posixpath.join(settings.vdir, filename),
        enable_path=posixpath.join(settings.vdir_enable, filename),
        log_dir=settings.log_dir,
    )
