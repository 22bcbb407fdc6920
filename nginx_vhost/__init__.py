__version__ = "0.1.0"

from nginx_vhost.core import Resource, Plan, Action, Platform
from nginx_vhost.core.executor import Executor
from nginx_vhost.errors import VhostError, ConfigurationError
from nginx_vhost.resources import File, Concat, Fragment, Service
from nginx_vhost.vhost import Vhost, VhostParams, Settings, declare_all
from nginx_vhost.logging import get_logger, get_vhost_logger, setup_logging

"""
Foundations of nginx-vhost:
    VhostParams describes one nginx virtual host.
    Vhost evaluates params into ordered fragments and an optional enable link.
    Concat merges fragments into the vhost config file.
    File manages the enable link and document root.
    Service reloads nginx when any of those change.
    Executor plans and applies resources.
"""

__all__ = [
    "Resource",
    "Plan",
    "Action",
    "Platform",
    "Executor",
    "VhostError",
    "ConfigurationError",
    "File",
    "Concat",
    "Fragment",
    "Service",
    "Vhost",
    "VhostParams",
    "Settings",
    "declare_all",
    "get_logger",
    "get_vhost_logger",
    "setup_logging",
]
