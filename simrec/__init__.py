"""User-based collaborative filtering with cosine similarity over sparse rating tables."""
