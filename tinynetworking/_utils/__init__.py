from ._logs import logger, setup_logging
from ._request_spec import RequestSpec
from ._ssl_context import get_httpx_client_kwargs
from ._url import append_query, encode_query
from ._user_agent import header_user_agent, user_agent_value

__all__ = [
    "RequestSpec",
    "append_query",
    "encode_query",
    "get_httpx_client_kwargs",
    "header_user_agent",
    "logger",
    "setup_logging",
    "user_agent_value",
]
