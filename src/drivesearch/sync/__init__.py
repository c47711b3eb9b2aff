"""Bridge to the external ``fuzzy-drive-search`` binary."""
