"""Clients for the retrieval and explanation services."""

from .base import SourceRetriever, TextCompleter
from .completion import ChatCompletionClient
from .etherscan import EtherscanRetriever, extract_source_text, holder_shares

__all__ = [
    "ChatCompletionClient",
    "EtherscanRetriever",
    "SourceRetriever",
    "TextCompleter",
    "extract_source_text",
    "holder_shares",
]
