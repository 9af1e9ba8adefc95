# Default numeric tolerances shared by the geometry and clipping modules.
# Callers that need different values pass explicit tolerances, or use
# cliptree.core.config.ClipConfig at the tree level.

# Distance below which two coordinates are considered the same.
SMALL_METRIC_DISTANCE = 1.0e-6

# Fraction within which a crossing is merged into the polygon vertex.
FRACTION_TOLERANCE = 1.0e-8

# Altitude tolerance for the fast containment pre-filter.
CLASSIFY_TOLERANCE = 1.0e-8

# Angles closer than this (modulo 2*pi) are considered equal.
SMALL_ANGLE_RADIANS = 1.0e-12

# Relative tolerance used to detect tangency in circle roots.
ROOT_RELATIVE_TOLERANCE = 1.0e-14

# Stand-in for an unbounded fraction along a line.
HUGE_FRACTION = 1.0e37
