"""Data models for navigation state, listings and exec results."""

from kubenav.models.listing import (
    Action,
    ExecResult,
    ItemKind,
    ListingResult,
    ListItem,
    NavEvent,
    Projection,
)
from kubenav.models.navigation import Depth, ExecSession, NavigationContext, NavigationState

__all__ = [
    "Action",
    "Depth",
    "ExecResult",
    "ExecSession",
    "ItemKind",
    "ListingResult",
    "ListItem",
    "NavEvent",
    "NavigationContext",
    "NavigationState",
    "Projection",
]
