"""Infrastructure layer: logging, XML decoding, HTTP dispatch and transport."""
