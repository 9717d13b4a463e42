"""Quote providers and the async quote resolver."""
