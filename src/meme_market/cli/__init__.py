"""Command-line client for the meme market API."""
