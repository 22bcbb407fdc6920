"""
Transport layer for command execution and file access.
"""

from nginx_vhost.transport.base import Transport, NullTransport
from nginx_vhost.transport.local import LocalTransport

__all__ = ["Transport", "NullTransport", "LocalTransport"]
