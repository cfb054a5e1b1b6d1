"""AWS provider exceptions."""
