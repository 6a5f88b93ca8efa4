import pytest

from reviewstack.design.slot_transform import RotationStability
from reviewstack.errors import InvalidConfiguration
from reviewstack.services.settings_service import ReviewSettings


def test_defaults_match_documented_values():
    s = ReviewSettings().validate()
    assert s.window_size == 3
    assert s.dismiss_threshold == 0.75
    assert s.velocity_threshold == 500
    assert s.epsilon == 0.01
    assert s.scale_ratio == 0.85
    assert s.base_offset == 44
    assert (s.min_rotation, s.max_rotation) == (1.0, 3.0)
    assert s.transform_config().stability is RotationStability.PER_SLOT


def test_restore_variant_preset():
    s = ReviewSettings.restore_variant(rotation_range=14, window_size=4)
    assert (s.min_rotation, s.max_rotation, s.window_size) == (8.0, 14, 4)


def test_component_views_carry_values():
    s = ReviewSettings(dismiss_threshold=0.5, velocity_threshold=300, epsilon=0.02)
    t = s.thresholds()
    assert t.effective_threshold == pytest.approx(0.48)
    assert t.velocity_threshold == 300


def test_replace_and_dict_round_trip():
    s = ReviewSettings().replace(window_size=5)
    assert ReviewSettings.from_dict(s.to_dict()) == s


@pytest.mark.parametrize(
    "changes",
    [
        {"window_size": 0},
        {"window_size": 1.5},
        {"dismiss_threshold": 0},
        {"velocity_threshold": -5},
        {"scale_ratio": -0.1},
        {"min_rotation": 4, "max_rotation": 2},
        {"rotation_stability": "per_frame"},
    ],
)
def test_validate_rejects(changes):
    with pytest.raises(InvalidConfiguration):
        ReviewSettings(**changes).validate()
