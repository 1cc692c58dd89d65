"""StarLens: browse, filter and sort a GitHub user's starred repositories."""
