"""Product routes."""
