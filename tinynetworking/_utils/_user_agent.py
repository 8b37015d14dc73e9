import importlib.metadata

from .constants import HEADER_USER_AGENT


def user_agent_value() -> str:
    try:
        version = importlib.metadata.version("tinynetworking")
    except importlib.metadata.PackageNotFoundError:
        version = "unknown"

    return f"TinyNetworking.Python/{version}"


def header_user_agent() -> dict[str, str]:
    return {HEADER_USER_AGENT: user_agent_value()}
