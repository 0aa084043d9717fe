"""
External service integrations for plant health.
"""

from .anthropic_client import AnthropicDiagnosisTransport

__all__ = ["AnthropicDiagnosisTransport"]
