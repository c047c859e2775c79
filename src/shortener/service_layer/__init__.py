"""Service layer: commands, queries, their handlers and the message bus."""
