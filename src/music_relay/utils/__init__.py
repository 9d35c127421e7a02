"""Formatting helpers shared by the chat surface and the console."""
