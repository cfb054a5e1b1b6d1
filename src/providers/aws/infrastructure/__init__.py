"""AWS credentials, signing and client wiring."""
