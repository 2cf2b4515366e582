"""Sheikh - terminal AI assistant with a codebase-aware agentic engine."""

__version__ = "2.0.0"
