"""
Render into /tmp instead of /etc/nginx, to try things out without root.

Run with:
    nginx-vhost plan examples/local-sandbox.py
"""

import getpass

from nginx_vhost import Settings, VhostParams

settings = Settings(
    daemon_user=getpass.getuser(),
    vdir="/tmp/nginx-vhost/sites-available",
    vdir_enable="/tmp/nginx-vhost/sites-enabled",
    log_dir="/tmp/nginx-vhost/log",
)

vhosts = [
    VhostParams("sandbox.local", www_root="/tmp/nginx-vhost/www", create_www_root="yes"),
    {"name": "legacy.local", "redirect": "https://sandbox.local$request_uri"},
]
