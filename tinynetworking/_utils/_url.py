from typing import Any, Iterator, Mapping, Optional, Tuple
from urllib.parse import quote, urlsplit, urlunsplit


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _iter_pairs(params: Mapping[str, Any]) -> Iterator[Tuple[str, str]]:
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            for item in value:
                yield key, _stringify(item)
        else:
            yield key, _stringify(value)


def encode_query(params: Optional[Mapping[str, Any]]) -> str:
    """Percent-encodes parameters into a query string.

    Spaces are encoded as ``%20`` rather than ``+``. ``None`` values are
    skipped and list values repeat their key.

    >>> encode_query({"foo": "bar bar"})
    'foo=bar%20bar'
    >>> encode_query({"tag": ["a", "b"], "missing": None})
    'tag=a&tag=b'
    """
    if not params:
        return ""

    return "&".join(
        f"{quote(key, safe='')}={quote(value, safe='')}"
        for key, value in _iter_pairs(params)
    )


def append_query(url: str, params: Optional[Mapping[str, Any]]) -> str:
    """Appends encoded parameters to ``url``, keeping any existing query.

    >>> append_query("http://www.example.com/example.json?abc=def", {"foo": "bar bar"})
    'http://www.example.com/example.json?abc=def&foo=bar%20bar'
    """
    encoded = encode_query(params)
    if not encoded:
        return url

    parts = urlsplit(url)
    query = f"{parts.query}&{encoded}" if parts.query else encoded

    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, query, parts.fragment)
    )
