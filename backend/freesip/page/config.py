from __future__ import annotations

from dataclasses import dataclass

LOCAL_HOSTNAMES = ("localhost", "127.0.0.1")
LOCAL_SUBMIT_ENDPOINT = "http://127.0.0.1:5000/api/contact/submit"
DEPLOYED_SUBMIT_ENDPOINT = "https://my-backend-5zho.onrender.com/api/contact/submit"


def resolve_submit_endpoint(hostname: str) -> str:
    if hostname in LOCAL_HOSTNAMES:
        return LOCAL_SUBMIT_ENDPOINT
    return DEPLOYED_SUBMIT_ENDPOINT


@dataclass(frozen=True)
class PageConfig:
    submit_endpoint: str = DEPLOYED_SUBMIT_ENDPOINT
    request_timeout: float = 10.0
    loader_delay_ms: int = 1500

    @classmethod
    def for_hostname(cls, hostname: str, **overrides) -> "PageConfig":
        return cls(submit_endpoint=resolve_submit_endpoint(hostname), **overrides)
