import os
import ssl
from typing import TYPE_CHECKING, Any, Dict, Optional

import certifi
import truststore

if TYPE_CHECKING:
    from .._config import Config


def _expand(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    return os.path.expanduser(os.path.expandvars(path))


def create_ssl_context(config: "Config") -> ssl.SSLContext:
    """Build the TLS context used to verify servers.

    Explicit CA paths in ``config`` are trusted exclusively. Without them the
    operating system trust store is used through truststore, or the certifi
    bundle when ``config.system_certs`` is off.
    """
    cafile = _expand(config.ssl_cert_file)
    capath = _expand(config.ssl_cert_dir)

    if cafile or capath:
        return ssl.create_default_context(cafile=cafile, capath=capath)
    if config.system_certs:
        return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    return ssl.create_default_context(cafile=certifi.where())


def get_httpx_client_kwargs(config: "Config") -> Dict[str, Any]:
    """Get the httpx client configuration for a session."""
    client_kwargs: Dict[str, Any] = {
        "follow_redirects": config.follow_redirects,
        "timeout": config.timeout,
    }

    if config.verify_ssl:
        client_kwargs["verify"] = create_ssl_context(config)
    else:
        client_kwargs["verify"] = False

    # HTTP_PROXY, HTTPS_PROXY and NO_PROXY are read by httpx itself

    return client_kwargs
