"""Match history sources."""

from repositories.match_feed import FeedSettings, MatchFeedError, fetch_matches, load_snapshot

__all__ = ["FeedSettings", "MatchFeedError", "fetch_matches", "load_snapshot"]
