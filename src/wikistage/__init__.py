"""Wikistage - a minimal wiki backed by plain text files."""
