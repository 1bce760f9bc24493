"""Console helpers for the cafce command line."""
