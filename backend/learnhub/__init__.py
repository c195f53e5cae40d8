"""LearnHub learning backend."""
