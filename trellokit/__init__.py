"""Typed Trello REST client with a plain-text card editing format."""

from __future__ import annotations

# Card text round-trip
from trellokit.card_text import CardContents, parse_card_text, render_card_text

# CLI
from trellokit.cli import main

# Configuration
from trellokit.config import Credentials, load_credentials, load_env_file

# Exceptions
from trellokit.exceptions import (
    CardParseError,
    TrelloAPIError,
    TrelloAuthenticationError,
    TrelloDecodeError,
    TrelloError,
    TrelloNotFoundError,
    TrelloRateLimitError,
    TrelloServerError,
)

# Label filtering
from trellokit.filtering import filter_board, filter_list

# Logging
from trellokit.logging_config import setup_logging

# Records
from trellokit.models import Attachment, Board, Card, Label, TrelloList, TrelloObject

# Rate limiting
from trellokit.rate_limiter import RateLimiter

# HTTP client
from trellokit.trello_client import TrelloClient

__version__ = "0.1.0"

__all__ = [
    # Core classes
    "TrelloClient",
    "RateLimiter",
    "setup_logging",
    "Credentials",
    "load_credentials",
    "load_env_file",
    # Records
    "TrelloObject",
    "Board",
    "TrelloList",
    "Card",
    "Label",
    "Attachment",
    # Text round-trip and filtering
    "CardContents",
    "render_card_text",
    "parse_card_text",
    "filter_list",
    "filter_board",
    # Exceptions
    "TrelloError",
    "CardParseError",
    "TrelloAPIError",
    "TrelloAuthenticationError",
    "TrelloNotFoundError",
    "TrelloRateLimitError",
    "TrelloServerError",
    "TrelloDecodeError",
    # CLI
    "main",
]
