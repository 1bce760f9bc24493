#!/usr/bin/env python3
"""Base exception shared by every cafce layer."""


class CafceError(Exception):
    """Base exception for all cafce failures"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
