"""GitHub API access for the starred-repositories browser."""
