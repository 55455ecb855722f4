"""
Engine constants for the garage door geometry.

All lengths are in feet. Door dimensions arrive in inches from the
configurator and are converted with INCH_TO_FT.
"""

INCH_TO_FT = 1.0 / 12.0

# Door body
SLAB_THICKNESS = 0.167  # 2" door thickness
BACK_PANEL_THICKNESS = 0.015

# Section frame groove
FRAME_BEVEL_THICKNESS = 0.010
FRAME_BEVEL_SIZE = 0.007
FRAME_BEVEL_SEGMENTS = 1

# Gap between stacked sections, wide enough to show both frame bevels
SECTION_GAP = 2 * (FRAME_BEVEL_THICKNESS + FRAME_BEVEL_SIZE)

# Height thresholds for the section count rule
FOUR_SECTION_LIMIT_FT = 8.0

# Width thresholds for the panel column rule
TWO_COLUMN_MAX_WIDTH_FT = 10.0
THREE_COLUMN_MAX_WIDTH_FT = 14.0

# Panel footprint as a fraction of its grid cell
PANEL_FILL_RATIO = 0.8

# Level 1: roundover
ROUNDOVER_RADIUS = 0.050
ROUNDOVER_DEPTH = 0.050
ROUNDOVER_BEVEL_SEGMENTS = 6

# Level 2: deep recess
DEEP_WIDTH = 0.14
DEEP_DEPTH = 0.042
DEEP_BEVEL_THICKNESS = 0.012
DEEP_BEVEL_SIZE = 0.010
DEEP_BEVEL_SEGMENTS = 4
SEAM_OVERLAP = 0.001

# Level 3: raised center
RAISED_HEIGHT = ROUNDOVER_DEPTH + DEEP_DEPTH
CENTER_BEVEL_THICKNESS = 0.010
CENTER_BEVEL_SIZE = 0.080

# Carriage house carving
NUM_GROOVES = 11
GROOVE_WIDTH = 0.05
V_GROOVE_DEPTH = 0.04
V_GROOVE_BEVEL_THICKNESS = 0.02

# Carriage house trim overlay
TRIM_WIDTH = 0.125
TRIM_THICKNESS = 0.042

# Shadow plane between sections
SHADOW_THICKNESS = 0.01
SHADOW_HEIGHT_RATIO = 0.95
SHADOW_OPACITY = 0.65

# Smallest inner opening the layered panel carving will attempt
MIN_FEATURE_SIZE = 0.05
