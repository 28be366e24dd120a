"""User interfaces for infosmith."""
