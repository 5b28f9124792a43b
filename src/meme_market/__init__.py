"""Meme stock market simulation: trend-driven pricing and leaderboard valuation."""

__version__ = "0.1.0"
