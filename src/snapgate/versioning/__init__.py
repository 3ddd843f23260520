"""Package specs and version resolution."""
