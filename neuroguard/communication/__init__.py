"""
External text-generation interface

This module contains the commentary client and the async commentary service
that explains metrics and predictions in natural language.
"""

from .llm_client import (
    CommentaryClient, CommentaryError, CommentaryRequest, CommentaryResponse,
    HttpClientConfig, HttpCommentaryClient, client_from_env
)
from .commentary import CommentaryService, ParsedQuery

__all__ = [
    'CommentaryClient', 'CommentaryError', 'CommentaryRequest', 'CommentaryResponse',
    'HttpClientConfig', 'HttpCommentaryClient', 'client_from_env',
    'CommentaryService', 'ParsedQuery'
]
