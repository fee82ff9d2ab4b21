"""
Comparison options for Visual Diff.

This module defines the configuration handed to the comparator on every run,
and the tolerance profile derived from its ignore flags.

Classes:
    CompareOptions: Immutable configuration for one comparison
    Tolerance: Per-channel and brightness tolerances resolved from ignore flags

Functions:
    resolve_tolerance: Combine ignore flags into a single Tolerance
"""

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Iterable, Tuple

from VD_Libs.constants import (
    DEFAULT_ERROR_COLOR,
    DEFAULT_ERROR_TYPE,
    DEFAULT_IGNORE,
    DEFAULT_LARGE_IMAGE_THRESHOLD,
    DEFAULT_OUTPUT_DIFF,
    DEFAULT_SCALE_TO_SAME_SIZE,
    DEFAULT_TRANSPARENCY,
    ERROR_TYPES,
    IGNORE_ALPHA,
    IGNORE_ANTIALIASING,
    IGNORE_COLORS,
    IGNORE_LESS,
    IGNORE_NOTHING,
)

RgbColor = Tuple[int, int, int]


@dataclass(frozen=True)
class Tolerance:
    """Tolerances used by the pixel analysis.

    Attributes:
        red, green, blue, alpha: Channel differences below these count as equal
        min_brightness: Brightness differences below this count as equal
        max_brightness: Neighbour brightness contrast above this marks anti-aliasing
        ignore_antialiasing: Forgive differences on anti-aliased pixels
        ignore_colors: Compare brightness and alpha only
    """
    red: int = 0
    green: int = 0
    blue: int = 0
    alpha: int = 0
    min_brightness: int = 0
    max_brightness: int = 255
    ignore_antialiasing: bool = False
    ignore_colors: bool = False


IGNORE_PROFILES: Dict[str, Tolerance] = {
    IGNORE_NOTHING: Tolerance(),
    IGNORE_LESS: Tolerance(16, 16, 16, 16, min_brightness=16, max_brightness=240),
    IGNORE_ANTIALIASING: Tolerance(
        32, 32, 32, 32, min_brightness=64, max_brightness=96, ignore_antialiasing=True
    ),
    IGNORE_COLORS: Tolerance(
        alpha=16, min_brightness=16, max_brightness=240, ignore_colors=True
    ),
    IGNORE_ALPHA: Tolerance(16, 16, 16, 255, min_brightness=16, max_brightness=240),
}


def resolve_tolerance(ignore: Iterable[str]) -> Tolerance:
    """
    Combine ignore flags into a single tolerance profile.

    Detection modes (anti-aliasing, brightness-only) are enabled when any
    flag asks for them. Numeric thresholds come from the last flag listed.
    An empty sequence is equivalent to ``("less",)``.

    Args:
        ignore: Ignore flag names (see IGNORE_PROFILES)

    Returns:
        The combined Tolerance

    Raises:
        ValueError: If a flag is unknown
    """
    flags = list(ignore)
    if not flags:
        return IGNORE_PROFILES[IGNORE_LESS]

    profiles = []
    for flag in flags:
        profile = IGNORE_PROFILES.get(flag)
        if profile is None:
            raise ValueError(
                f"Invalid ignore flag: {flag!r}. Must be one of {sorted(IGNORE_PROFILES)}"
            )
        profiles.append(profile)

    return replace(
        profiles[-1],
        ignore_antialiasing=any(p.ignore_antialiasing for p in profiles),
        ignore_colors=any(p.ignore_colors for p in profiles),
    )


@dataclass(frozen=True)
class CompareOptions:
    """Configuration for one image comparison.

    The defaults are the fixed options every command-line run uses.

    Attributes:
        output_diff: Render a diff image (default: True)
        error_color: RGB color marking changed pixels (default: magenta)
        error_type: Highlight mode, one of ERROR_TYPES (default: "movement")
        transparency: Alpha factor 0-1 for unchanged pixels (default: 0.3)
        large_image_threshold: Width/height above which pixels are sampled
                               (default: 1200, 0 disables sampling)
        scale_to_same_size: Resize the candidate to the reference size (default: True)
        ignore: Tolerance flags (default: all five)
    """
    output_diff: bool = DEFAULT_OUTPUT_DIFF
    error_color: RgbColor = DEFAULT_ERROR_COLOR
    error_type: str = DEFAULT_ERROR_TYPE
    transparency: float = DEFAULT_TRANSPARENCY
    large_image_threshold: int = DEFAULT_LARGE_IMAGE_THRESHOLD
    scale_to_same_size: bool = DEFAULT_SCALE_TO_SAME_SIZE
    ignore: Tuple[str, ...] = field(default=DEFAULT_IGNORE)

    def __post_init__(self):
        """Validate and normalize option values."""
        color = tuple(int(c) for c in self.error_color)
        if len(color) != 3 or any(c < 0 or c > 255 for c in color):
            raise ValueError(f"error_color must be three values 0-255, got {self.error_color}")
        object.__setattr__(self, "error_color", color)

        if self.error_type not in ERROR_TYPES:
            raise ValueError(f"Unsupported error_type: {self.error_type}")

        if not (0.0 <= self.transparency <= 1.0):
            raise ValueError(f"transparency must be 0-1, got {self.transparency}")

        if self.large_image_threshold < 0:
            raise ValueError(
                f"large_image_threshold must be >= 0, got {self.large_image_threshold}"
            )

        if isinstance(self.ignore, str):
            object.__setattr__(self, "ignore", (self.ignore,))
        else:
            object.__setattr__(self, "ignore", tuple(self.ignore))
        # Raises on unknown flags
        resolve_tolerance(self.ignore)

    @property
    def tolerance(self) -> Tolerance:
        """Tolerance profile for this option set."""
        return resolve_tolerance(self.ignore)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["error_color"] = list(self.error_color)
        data["ignore"] = list(self.ignore)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompareOptions":
        """Create from dictionary, ignoring unknown keys."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)
