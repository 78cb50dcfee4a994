"""Pydantic configuration model for the Pastebin client."""

from pydantic import BaseModel, Field

from .. import __version__
from .enums import RateLimitMode

API_URL = "https://pastebin.com/api/api_post.php"
LOGIN_URL = "https://pastebin.com/api/api_login.php"
RAW_URL = "https://pastebin.com/api/api_raw.php"
PUBLIC_RAW_URL = "https://pastebin.com/raw/{key}"

DEFAULT_USER_AGENT = f"pastebin-client/{__version__}"


class PastebinConfig(BaseModel):
    """
    Configuration for a Pastebin client.

    Only ``api_key`` is required. Everything is passed explicitly at
    construction; nothing is read from files or the environment.

    Example:
        config = PastebinConfig(
            api_key="0123456789abcdef",
            rate_limit_mode=RateLimitMode.BURST,
        )
    """

    api_key: str = Field(..., min_length=1, description="Developer API key (api_dev_key)")
    rate_limit_mode: RateLimitMode = Field(
        RateLimitMode.NONE,
        description="Rate limit policy (none, pace, burst)",
    )
    user_agent: str = Field(DEFAULT_USER_AGENT, description="User-Agent header")
    timeout: float = Field(30.0, gt=0, description="Request timeout in seconds")

    api_url: str = Field(API_URL, description="Endpoint for api_option calls")
    login_url: str = Field(LOGIN_URL, description="Endpoint for user login")
    raw_url: str = Field(RAW_URL, description="Endpoint for raw text of private pastes")
    public_raw_url: str = Field(
        PUBLIC_RAW_URL,
        description="URL template for raw text of public pastes",
    )

    model_config = {"extra": "forbid", "frozen": True}
