"""
Synthetic wand captures with known camera geometry.
"""
