"""Graph resolution and persistence around the asset contract."""
