# src/tuiter_stage/services/__init__.py
"""Business logic services for the Tuiter application."""

from .identity import IdentityService
from .likes import EngagementLedger, LikeState
from .media import MediaIntake
from .reconciler import MediaReconciler
from .registry import ServiceRegistry

__all__ = [
    "IdentityService",
    "EngagementLedger",
    "LikeState",
    "MediaIntake",
    "MediaReconciler",
    "ServiceRegistry",
]
