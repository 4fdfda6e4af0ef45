from easywand import config
from easywand.api import load_fundamental_matrix, save_fundamental_matrix
from easywand.config import CalibrationConfig
from easywand.core.fundamental import FundamentalMatrixEstimate, calibrate_pairs, compute_fundamental_matrix
from easywand.core.pose import recover_pose
from easywand.correspondences import CorrespondenceRecord, CorrespondenceSet, Observation
from easywand.errors import (
    DegenerateConfiguration,
    DegenerateScale,
    EasyWandError,
    InsufficientCorrespondences,
    MalformedInput,
    MissingProfile,
    UnsupportedOperation,
)
from easywand.profiles import CameraProfile, ProfileStore

__all__ = [
    "config",
    "CalibrationConfig",
    "CameraProfile",
    "ProfileStore",
    "Observation",
    "CorrespondenceRecord",
    "CorrespondenceSet",
    "FundamentalMatrixEstimate",
    "compute_fundamental_matrix",
    "calibrate_pairs",
    "recover_pose",
    "load_fundamental_matrix",
    "save_fundamental_matrix",
    "EasyWandError",
    "MalformedInput",
    "MissingProfile",
    "InsufficientCorrespondences",
    "DegenerateConfiguration",
    "DegenerateScale",
    "UnsupportedOperation",
]
