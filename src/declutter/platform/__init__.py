"""Platform services (logging, filesystem) shared by every feature."""
