from __future__ import annotations


class EasyWandError(Exception):
    """Base class for every failure raised by easywand."""


class MalformedInput(EasyWandError, ValueError):
    pass


class MissingProfile(EasyWandError, LookupError):
    def __init__(self, camera_id: int) -> None:
        super().__init__(f"no camera profile for camera {camera_id}")
        self.camera_id = int(camera_id)


class InsufficientCorrespondences(EasyWandError, ValueError):
    def __init__(self, count: int, required: int = 8) -> None:
        super().__init__(f"need >= {required} correspondences, got {count}")
        self.count = int(count)
        self.required = int(required)


class DegenerateConfiguration(EasyWandError, ValueError):
    """The design matrix does not have a one-dimensional null space."""


class DegenerateScale(EasyWandError, ValueError):
    """F[2,2] is numerically zero, so F cannot be canonicalized."""


class UnsupportedOperation(EasyWandError, NotImplementedError):
    pass
