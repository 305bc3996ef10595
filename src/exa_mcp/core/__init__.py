"""Core building blocks: request context, logging, responses, Exa client and research polling."""
