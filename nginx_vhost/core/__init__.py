"""
Core functionality.

Exports core abstractions and base classes.
"""

from nginx_vhost.core.resource import Resource, Plan, Action, Change, Platform

__all__ = ["Resource", "Plan", "Action", "Change", "Platform"]
