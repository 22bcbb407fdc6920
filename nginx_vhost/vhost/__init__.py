"""
nginx virtual host definitions.
"""

from nginx_vhost.vhost.define import Vhost, VhostDeclaration, declare_all
from nginx_vhost.vhost.fragments import emit_fragments
from nginx_vhost.vhost.osfamily import OSFamily, EnableLink, enable_link_for, os_family
from nginx_vhost.vhost.params import VhostParams, NormalizedVhost, normalize, to_bool
from nginx_vhost.vhost.settings import Settings
from nginx_vhost.vhost.validate import validate

__all__ = [
    "Vhost",
    "VhostDeclaration",
    "declare_all",
    "emit_fragments",
    "OSFamily",
    "EnableLink",
    "enable_link_for",
    "os_family",
    "VhostParams",
    "NormalizedVhost",
    "normalize",
    "to_bool",
    "Settings",
    "validate",
]
