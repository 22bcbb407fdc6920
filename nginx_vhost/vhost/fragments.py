"""
Fragment emission for a vhost config file.

Order tags fix the layout of the merged file:

    00  default     always
    01  header      plain http server block opening
    68  fastcgi     php location inside the plain block
    69  footer      plain http server block closing
    70  ssl-header  ssl server block opening
    99  ssl-footer  ssl server block closing
"""

from typing import Any, Dict, List

from nginx_vhost.resources.concat import ABSENT, Fragment
from nginx_vhost.vhost.params import NormalizedVhost

ORDER_DEFAULT = "00"
ORDER_HEADER = "01"
ORDER_FASTCGI = "68"
ORDER_FOOTER = "69"
ORDER_SSL_HEADER = "70"
ORDER_SSL_FOOTER = "99"

PLAIN_ORDERS = (ORDER_HEADER, ORDER_FASTCGI, ORDER_FOOTER)
SSL_ORDERS = (ORDER_SSL_HEADER, ORDER_SSL_FOOTER)


def template_context(vhost: NormalizedVhost, has_ipv6: bool) -> Dict[str, Any]:
    """Variables shared by every fragment template."""
    return {
        "vhost": vhost,
        "ipv6_listen": vhost.ipv6_enable and has_ipv6,
    }


def emit_fragments(vhost: NormalizedVhost, has_ipv6: bool = True) -> List[Fragment]:
    """
    Declare the fragments of one vhost, sorted by order tag.

    ssl_only drops the plain http fragments entirely; the ssl fragments
    depend on the ssl flag alone.
    """
    context = template_context(vhost, has_ipv6)

    def fragment(order: str, name: str, template: str, ensure: str = vhost.ensure) -> Fragment:
        return Fragment(
            order=order,
            name=f"{vhost.name}-{name}",
            target=vhost.config_file,
            template=template,
            ensure=ensure,
            context=context,
        )

    fragments = [fragment(ORDER_DEFAULT, "default", "vhost_default.conf.j2")]

    if not vhost.ssl_only:
        fragments.append(fragment(ORDER_HEADER, "header", "vhost_header.conf.j2"))
        fragments.append(fragment(
            ORDER_FASTCGI,
            "fastcgi",
            "vhost_fastcgi.conf.j2",
            ensure=vhost.ensure if vhost.fastcgi_pass else ABSENT,
        ))
        fragments.append(fragment(ORDER_FOOTER, "footer", "vhost_footer.conf.j2"))

    if vhost.ssl:
        fragments.append(fragment(ORDER_SSL_HEADER, "ssl-header", "vhost_ssl_header.conf.j2"))
        fragments.append(fragment(ORDER_SSL_FOOTER, "ssl-footer", "vhost_ssl_footer.conf.j2"))

    return sorted(fragments, key=lambda f: f.sort_key)
