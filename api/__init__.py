"""
Módulo API
"""
from .http_client import (
    EmptyPayload,
    RetryPolicy,
    check_cancelled,
    fetch_json,
)

__all__ = [
    'EmptyPayload',
    'RetryPolicy',
    'check_cancelled',
    'fetch_json',
]
