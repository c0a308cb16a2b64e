"""
Utilities Module
Helper functions for the concierge service
"""

from .async_helpers import gather_settled, Settled

__all__ = [
    "gather_settled",
    "Settled"
]
