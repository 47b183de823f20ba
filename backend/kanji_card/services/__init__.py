"""Services package for storage, LLM access and the vocabulary core."""
