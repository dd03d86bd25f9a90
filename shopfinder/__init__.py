"""Product search orchestration backed by an external shopping-search provider."""
