from easywand.io.readers import read_background_points, read_camera_profiles, read_wand_points
from easywand.io.writers import write_camera_profiles, write_wand_points

__all__ = [
    "read_background_points",
    "read_camera_profiles",
    "read_wand_points",
    "write_camera_profiles",
    "write_wand_points",
]
