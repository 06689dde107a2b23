"""Command-line front end for pattern file conversions."""
