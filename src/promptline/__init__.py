"""Promptline - Langfuse prompt resolution and AI call tracing.

Resolves named prompts through cache, the Langfuse prompt API and
local fallback storage, and records traces of AI platform calls.
"""

__version__ = "0.1.0"
