"""Page storage, path validation and template rendering."""
