"""Chat relay: routes browser chat messages to OpenAI-compatible providers."""
