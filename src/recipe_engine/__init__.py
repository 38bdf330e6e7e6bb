"""Recipe generation routing and versioning engine."""
