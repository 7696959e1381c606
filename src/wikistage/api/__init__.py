"""HTTP handlers for wiki pages."""
