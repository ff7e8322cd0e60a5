"""Langfuse API clients: prompt retrieval and trace ingestion."""

from promptline.client.ingestion import GenerationHandle, IngestionClient, TraceHandle
from promptline.client.prompt_client import PromptClient
from promptline.client.trace_client import TraceClient

__all__ = [
    "GenerationHandle",
    "IngestionClient",
    "PromptClient",
    "TraceClient",
    "TraceHandle",
]
