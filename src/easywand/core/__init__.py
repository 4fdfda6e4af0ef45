"""
Two-view epipolar geometry from wand correspondences.

Normalized eight-point estimate, rank-2 projection and denormalization back to
pixel coordinates.
"""
