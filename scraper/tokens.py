"""Credential sources for the catalog API headers."""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class ApiTokens:
    """Opaque tokens sent as ``x-token`` and ``x-request-id`` headers."""

    token: str
    request_id: Optional[str] = None


class TokenSource(ABC):
    """Supplies the tokens the catalog API expects for a category."""

    @abstractmethod
    def get_tokens(self, category_url: str) -> ApiTokens:
        """Return the tokens to use for requests against a category.

        Args:
            category_url: Category page URL the requests refer to

        Returns:
            ApiTokens instance
        """
        pass


class StaticTokenSource(TokenSource):
    """Returns the same tokens for every category."""

    def __init__(self, token: str, request_id: Optional[str] = None) -> None:
        if not token:
            raise ValueError("An x-token value is required")
        self.tokens = ApiTokens(token=token, request_id=request_id or None)

    def get_tokens(self, category_url: str) -> ApiTokens:
        return self.tokens


class EnvTokenSource(TokenSource):
    """Reads tokens from ``HOTLINE_X_TOKEN`` / ``HOTLINE_X_REQUEST_ID``.

    The ``.env`` file is loaded on first use, so values can live there
    instead of the shell environment.
    """

    def __init__(
        self,
        token_var: str = "HOTLINE_X_TOKEN",
        request_id_var: str = "HOTLINE_X_REQUEST_ID",
    ) -> None:
        self.token_var = token_var
        self.request_id_var = request_id_var

    def get_tokens(self, category_url: str) -> ApiTokens:
        load_dotenv()
        token = os.getenv(self.token_var)
        if not token:
            raise ValueError(
                f"Missing {self.token_var}. Please check your .env file."
            )
        return ApiTokens(token=token, request_id=os.getenv(self.request_id_var))
