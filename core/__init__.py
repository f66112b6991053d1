"""Core services for scriptcanon: errors, logging, HTTP I/O and the parsers."""
