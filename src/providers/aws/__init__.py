"""Amazon Web Services provider."""
