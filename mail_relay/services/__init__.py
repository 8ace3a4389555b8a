"""Services wrapping the MIME parser, HTML conversion and the outbound API."""
