"""
Two vhosts: a reverse proxy and a PHP site served over https only.

Run with:
    nginx-vhost render examples/sites.py
    nginx-vhost plan examples/sites.py
    sudo nginx-vhost apply examples/sites.py
"""

from nginx_vhost import VhostParams

vhosts = [
    VhostParams(
        "app.example.com",
        server_name=["app.example.com", "www.app.example.com"],
        proxy="http://127.0.0.1:8000",
        proxy_read_timeout=120,
        default_server=True,
        ipv6_enable=True,
    ),
    VhostParams(
        "shop.example.com",
        www_root="/var/www/shop",
        create_www_root=True,
        fastcgi="unix:/run/php/php8.2-fpm.sock",
        ssl=True,
        ssl_only=True,
        ssl_cert="/etc/letsencrypt/live/shop.example.com/fullchain.pem",
        ssl_key="/etc/letsencrypt/live/shop.example.com/privkey.pem",
    ),
]
