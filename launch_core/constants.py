#!/usr/bin/env python3
"""
Shared constants for Gravity Launch (game units: metres, seconds, kilograms).

Keeping tuning values in one place keeps the preview path and the real flight
consistent; the predictor and the stepper must read the same numbers.
"""

# Launch tuning
TIME_FOR_MAX_POWER = 2.0  # s; holding longer than this does not add power
MAX_SPEED = 50.0  # speed cap for smooth gameplay

# Physics controls
FIXED_DT = 0.02  # s of simulation time per fixed step
MAX_SUBSTEPS = 8  # cap of fixed steps per rendered frame
GRAVITY_CONSTANT = 10.0  # game-scale G
DEFAULT_SOFTENING = 0.5  # m; avoids singular forces near planet centres

# Prediction
MAX_POSITION_DRAWS = 100  # number of samples in a predicted path

# Camera
CAMERA_DISTANCE = 100.0  # distance from camera to the play plane
DEFAULT_METERS_PER_PIXEL = 0.1
MIN_METERS_PER_PIXEL = 0.01
MAX_METERS_PER_PIXEL = 10.0

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (10, 12, 18)
PATH_COLOR = (120, 200, 255)
INDICATOR_COLOR = (255, 255, 0)
PLAYER_COLOR = (240, 240, 240)
HUD_COLOR = (200, 200, 200)

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
