"""AnonBBS Data Module - Message and service state models."""

from .models import Message, ServiceState, ServiceSettings

__all__ = ["Message", "ServiceState", "ServiceSettings"]
