"""HTTP surface for the user-user CF recommender."""
