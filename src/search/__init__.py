"""Search backend request shaping."""
