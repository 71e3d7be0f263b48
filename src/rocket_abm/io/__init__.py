"""On-disk output for renderers and offline analysis."""
