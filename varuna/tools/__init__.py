from .rss_tool import RSSTool, FeedFetchError, FeedParseError

__all__ = ["RSSTool", "FeedFetchError", "FeedParseError"]
