from oshi_bonus.intimacy import (
    STAGES,
    describe_intimacy,
    intimacy_progress,
    intimacy_stage,
    intimacy_to_next_level,
)


def test_stage_boundaries_are_inclusive() -> None:
    assert intimacy_stage(0).key == "best_friend"
    assert intimacy_stage(100).key == "best_friend"
    assert intimacy_stage(101).key == "special_friend"
    assert intimacy_stage(300).title == "恋人候補"
    assert intimacy_stage(301).title == "恋人"
    assert intimacy_stage(5000).key == "ultimate_love"
    assert intimacy_stage(5001).key == "infinite_love"
    assert intimacy_stage(5001).index == len(STAGES) - 1


def test_to_next_level() -> None:
    assert intimacy_to_next_level(0) == 100
    assert intimacy_to_next_level(150) == 50
    assert intimacy_to_next_level(4999) == 1
    assert intimacy_to_next_level(5000) == 0
    assert intimacy_to_next_level(9999) == 0


def test_progress_ratio() -> None:
    assert intimacy_progress(50) == 0.5
    assert intimacy_progress(350) == 0.25
    assert intimacy_progress(6000) == 1.0


def test_describe_intimacy() -> None:
    info = describe_intimacy(250)
    assert info.level == 250
    assert info.stage.key == "love_candidate"
    assert info.to_next_level == 50
    assert info.progress_ratio == 0.5
