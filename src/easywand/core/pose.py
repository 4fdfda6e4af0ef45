from __future__ import annotations

from typing import TYPE_CHECKING

from easywand.errors import UnsupportedOperation
from easywand.profiles import CameraProfile

if TYPE_CHECKING:
    from easywand.core.fundamental import FundamentalMatrixEstimate


def recover_pose(estimate: "FundamentalMatrixEstimate", profile_a: CameraProfile, profile_b: CameraProfile):
    """
    Relative rotation and translation between the two cameras of `estimate`.

    Not available yet: no decomposition algorithm (and no rule for choosing
    among its four candidate poses) has been settled, so this always raises
    instead of returning a placeholder pose.
    """
    raise UnsupportedOperation(
        f"pose recovery for cameras {profile_a.camera_id} and {profile_b.camera_id} is not supported"
    )
