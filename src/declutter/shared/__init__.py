"""Cross-feature value objects shared by the application layer."""
