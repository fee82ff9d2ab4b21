"""
Constants and configuration values for Visual Diff.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# Output files (relative to the working directory)
DEFAULT_OUTPUT_IMAGE_PATH = "./output.png"
DEFAULT_OUTPUT_JSON_PATH = "./output.json"
DEFAULT_OUTPUT_FORMAT = "PNG"
JSON_ENCODING = "utf-8"
TEMP_FILE_SUFFIX = ".part"
BACKUP_FILE_SUFFIX = ".bak"
OUTPUT_FILE_MODE = 0o644

# Default comparison options
DEFAULT_ERROR_COLOR = (255, 0, 255)
DEFAULT_ERROR_TYPE = "movement"
DEFAULT_TRANSPARENCY = 0.3
DEFAULT_LARGE_IMAGE_THRESHOLD = 1200
DEFAULT_SCALE_TO_SAME_SIZE = True
DEFAULT_OUTPUT_DIFF = True
DEFAULT_IGNORE = ("nothing", "less", "antialiasing", "colors", "alpha")

# Error pixel rendering modes
ERROR_TYPE_FLAT = "flat"
ERROR_TYPE_MOVEMENT = "movement"
ERROR_TYPE_FLAT_INTENSITY = "flatDifferentIntensity"
ERROR_TYPE_MOVEMENT_INTENSITY = "movementDifferentIntensity"
ERROR_TYPE_DIFF_ONLY = "diffOnly"
ERROR_TYPES = (
    ERROR_TYPE_FLAT,
    ERROR_TYPE_MOVEMENT,
    ERROR_TYPE_FLAT_INTENSITY,
    ERROR_TYPE_MOVEMENT_INTENSITY,
    ERROR_TYPE_DIFF_ONLY,
)

# Ignore flags
IGNORE_NOTHING = "nothing"
IGNORE_LESS = "less"
IGNORE_ANTIALIASING = "antialiasing"
IGNORE_COLORS = "colors"
IGNORE_ALPHA = "alpha"

# Pixel analysis
BRIGHTNESS_WEIGHTS = (0.3, 0.59, 0.11)
HUE_DIFFERENCE_LIMIT = 0.3
LARGE_IMAGE_SKIP_STEP = 6
INTENSITY_RATIO_SCALE = 0.8

# Statistics field names
FIELD_IS_SAME_DIMENSIONS = "isSameDimensions"
FIELD_DIMENSION_DIFFERENCE = "dimensionDifference"
FIELD_RAW_MISMATCH_PERCENTAGE = "rawMisMatchPercentage"
FIELD_MISMATCH_PERCENTAGE = "misMatchPercentage"
FIELD_DIFF_BOUNDS = "diffBounds"
FIELD_ANALYSIS_TIME = "analysisTime"

# CLI exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
