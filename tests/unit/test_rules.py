from eligibility_checker.domain.rules import DEFAULT_THRESHOLD_YEARS, is_eligible


def test_default_threshold_is_eighteen():
    assert DEFAULT_THRESHOLD_YEARS == 18


def test_is_eligible_matches_threshold_for_all_plausible_ages():
    for age in range(0, 151):
        assert is_eligible(age) == (age >= 18)


def test_is_eligible_honours_configured_threshold():
    assert not is_eligible(20, threshold_years=21)
    assert is_eligible(21, threshold_years=21)
