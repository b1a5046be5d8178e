"""
Client Module

This module provides the translation service client and its error taxonomy.
"""

from transync.client.cancellation import CancellationToken
from transync.client.exceptions import (
    ContentNotFound,
    ErrorKind,
    HTTPError,
    MalformedResponse,
    NetworkError,
    RequestTimeout,
    TranslationCancelled,
    TranslationError,
)
from transync.client.payload import TranslationResult
from transync.client.service import TranslationClient

__all__ = [
    'CancellationToken',
    'ContentNotFound',
    'ErrorKind',
    'HTTPError',
    'MalformedResponse',
    'NetworkError',
    'RequestTimeout',
    'TranslationCancelled',
    'TranslationError',
    'TranslationResult',
    'TranslationClient',
]
