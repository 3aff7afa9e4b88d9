"""PlayVault rewards API."""
