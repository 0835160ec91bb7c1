"""Property identity resolution and competitive rent analytics."""
