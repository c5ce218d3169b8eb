def test_public_api_exports() -> None:
    import tapfocus as tf

    assert hasattr(tf, "decode_float16")
    assert hasattr(tf, "sample_points_for_focus")
    assert hasattr(tf, "find_closest_sample_to_ray")
    assert hasattr(tf, "compute_screen_distance_px")
    assert hasattr(tf, "pick_focus_point")
    assert hasattr(tf, "Ray")
    assert issubclass(tf.FocusContractError, ValueError)
