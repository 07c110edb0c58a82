"""Version identifiers and the records built around them."""
