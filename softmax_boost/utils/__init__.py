"""Data generation, model interface and plotting utilities."""
