"""
Resources managed by the executor.
"""

from nginx_vhost.resources.file import File
from nginx_vhost.resources.concat import Concat, Fragment, merge_fragments, PRESENT, ABSENT
from nginx_vhost.resources.service import Service

__all__ = ["File", "Concat", "Fragment", "merge_fragments", "Service", "PRESENT", "ABSENT"]
