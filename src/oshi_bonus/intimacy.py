from __future__ import annotations

from dataclasses import dataclass

# Lower bound of each stage; a stage runs up to and including the next bound.
STAGE_THRESHOLDS: tuple[int, ...] = (
    0, 100, 200, 300, 500, 700, 1000, 1300, 1600, 2000, 2500, 3000, 3500, 4000, 4500, 5000,
)

STAGES: tuple[tuple[str, str], ...] = (
    ("best_friend", "親友"),
    ("special_friend", "特別な友達"),
    ("love_candidate", "恋人候補"),
    ("lover", "恋人"),
    ("deep_bond_lover", "深い絆の恋人"),
    ("soul_connected_lover", "心の繋がった恋人"),
    ("destiny_lover", "運命の恋人"),
    ("unique_existence", "唯一無二の存在"),
    ("soulmate", "魂の伴侶"),
    ("eternal_promise", "永遠の約束"),
    ("destiny_partner", "運命共同体"),
    ("one_heart", "一心同体"),
    ("miracle_bond", "奇跡の絆"),
    ("sacred_love", "神聖な愛"),
    ("ultimate_love", "究極の愛"),
    ("infinite_love", "無限の愛"),
)

MAX_THRESHOLD = STAGE_THRESHOLDS[-1]


@dataclass(frozen=True)
class IntimacyStage:
    index: int
    key: str
    title: str


@dataclass(frozen=True)
class IntimacyProgress:
    level: int
    stage: IntimacyStage
    to_next_level: int
    progress_ratio: float


def intimacy_stage(level: int) -> IntimacyStage:
    index = 0
    for i, upper in enumerate(STAGE_THRESHOLDS[1:]):
        if level <= upper:
            index = i
            break
    else:
        index = len(STAGES) - 1
    key, title = STAGES[index]
    return IntimacyStage(index=index, key=key, title=title)


def intimacy_to_next_level(level: int) -> int:
    for threshold in STAGE_THRESHOLDS[1:]:
        if level < threshold:
            return threshold - level
    return 0


def intimacy_progress(level: int) -> float:
    for lower, upper in zip(STAGE_THRESHOLDS, STAGE_THRESHOLDS[1:]):
        if lower <= level < upper:
            return (level - lower) / (upper - lower)
    if level < 0:
        return 0.0
    return 1.0


def describe_intimacy(level: int) -> IntimacyProgress:
    return IntimacyProgress(
        level=level,
        stage=intimacy_stage(level),
        to_next_level=intimacy_to_next_level(level),
        progress_ratio=intimacy_progress(level),
    )
