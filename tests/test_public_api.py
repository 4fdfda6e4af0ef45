from __future__ import annotations


def test_public_api_exports() -> None:
    import easywand as ew

    assert hasattr(ew, "compute_fundamental_matrix")
    assert hasattr(ew, "calibrate_pairs")
    assert hasattr(ew, "FundamentalMatrixEstimate")
    assert hasattr(ew, "CorrespondenceSet")
    assert hasattr(ew, "ProfileStore")
    assert hasattr(ew, "recover_pose")
    assert hasattr(ew, "load_fundamental_matrix")
    assert hasattr(ew, "save_fundamental_matrix")
    assert issubclass(ew.InsufficientCorrespondences, ew.EasyWandError)
    assert issubclass(ew.DegenerateConfiguration, ValueError)
    assert issubclass(ew.MissingProfile, LookupError)
