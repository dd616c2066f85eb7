"""
Context Broker Integration

Client and entity schemas for the NGSI-LD context broker that publishes
beaches and water quality observations.
"""

from .client import ContextBrokerClient, ContextBrokerError
from .schemas import BeachEntity, WaterQualityObservedEntity, DEFAULT_CONTEXT_URL

__all__ = [
    'ContextBrokerClient',
    'ContextBrokerError',
    'BeachEntity',
    'WaterQualityObservedEntity',
    'DEFAULT_CONTEXT_URL',
]
