"""Shared tracking constants.

Centralizes the sampling, gating and heatmap values so the loop, the
renderer and the settings defaults agree on them.
"""

# Mean Earth radius used for great-circle distances (meters)
EARTH_RADIUS_M = 6_371_000.0

# Displacement from the baseline fix before logging starts (meters), 20-50 m
MOVEMENT_THRESHOLD_M = 30.0

# Sampling timer period and per-fix acquisition timeout (seconds)
SAMPLE_PERIOD_S = 5.0
FIX_TIMEOUT_S = 10.0

# Heat styling: one translucent blue circle per point, no stroke
HEAT_RADIUS_M = 40.0
HEAT_FILL_RGBA = (0, 0, 255, 0.8)
HEAT_STROKE_WIDTH = 0

# Map view radius after a full render vs. after recentering on a fresh save
RENDER_RADIUS_KM = 1.0
RECENTER_RADIUS_KM = 0.5

# Number of status events kept for GET /tracking/status
STATUS_HISTORY = 50

# Pushed fixes waiting for the loop before POST /fixes is refused
MAX_PENDING_FIXES = 1000
