"""Domain layer - provider integrations and the item model they produce."""
