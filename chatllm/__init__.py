"""chatllm: relay chat-platform messages to OpenAI-compatible LLMs."""

__version__ = "0.1.0"
