"""Extract, summarize, and translate blog posts, then archive them."""

__all__ = ["config", "extractor", "summarizer", "translator", "workflow"]
