"""Level math for the gamification system."""

from dataclasses import asdict, dataclass

XP_PER_LEVEL = 100


@dataclass(frozen=True)
class XpProgress:
    total_xp: int
    level: int
    xp_for_current_level: int
    xp_for_next_level: int
    progress_to_next_level: int  # percent, 0-99

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def level_for_xp(xp: int) -> int:
    """Level reached with the given XP: floor(xp / 100) + 1."""
    if xp < 0:
        raise ValueError("xp must be non-negative")
    return xp // XP_PER_LEVEL + 1


def xp_for_level(level: int) -> int:
    """XP at which the given level starts."""
    if level < 1:
        raise ValueError("level must be at least 1")
    return (level - 1) * XP_PER_LEVEL


def xp_progress(xp: int) -> XpProgress:
    """Full breakdown of a user's position within their current level."""
    level = level_for_xp(xp)
    current = xp_for_level(level)
    following = xp_for_level(level + 1)
    progress = (xp - current) * 100 // (following - current)
    return XpProgress(
        total_xp=xp,
        level=level,
        xp_for_current_level=current,
        xp_for_next_level=following,
        progress_to_next_level=progress,
    )
