# polishing_simulator/config.py
"""
Configuration constants for the planetary polishing simulator.
Frame names, default process parameters, sweep and playback settings.
"""

import math

# --- Reference Frames ---
FRAME_BASIC = "basic"
FRAME_UPPER = "upper"
FRAME_LOWER = "lower"
FRAME_COMBINED = "combined"

FRAME_NAMES = [FRAME_BASIC, FRAME_UPPER, FRAME_LOWER, FRAME_COMBINED]

# --- Unit Conversion ---
SECONDS_PER_MINUTE = 60.0
RPM_TO_RAD_S = 2 * math.pi / SECONDS_PER_MINUTE

# --- Default Values ---
# Lengths in mm, speeds in rev/min, times in s.
DEFAULT_PROCESS_PARAMS = {
    "sun_gear_teeth": 96,
    "ring_gear_teeth": 338,
    "sun_gear_radius": 267.0,
    "ring_gear_radius": 987.5,
    "carrier_gear_radius": 372.0,
    "wafer_radius": 150.0,
    "center_to_carrier_distance": 639.0,
    "carrier_to_wafer_distance": 198.0,
    "sun_rpm": 17.1,
    "ring_rpm": -3.9,
    "upper_rpm": -12.5,
    "lower_rpm": 23.6,
    "num_carriers": 1,
    "num_wafers_per_carrier": 1,
    "num_disc_samples": 15,   # Monte-Carlo samples per wafer, unrelated to tracked points
    "total_time": 500.0,
    "time_step": 0.1,
    "plate_inner_radius": 295.0,
    "plate_outer_radius": 935.0,
    "pressure_mpa": 0.3,
    "preston_coefficient": 3e-8,
}

DEFAULT_TRACKED_POINTS = [
    {"r": 1.0, "theta": 0.0, "carrier_index": 0, "wafer_index": 0, "label": "Center Point"},
    {"r": 150.0, "theta": math.pi / 4, "carrier_index": 0, "wafer_index": 0, "label": "Edge Point"},
]

# --- Simulation Parameters ---
SIM_BIN_INTERVAL = 5.0          # Width of the x-crossing histogram bins (mm)
SIM_DISTANCE_GRID_SIZE = 40     # Nodes per side of the cumulative distance grid
SIM_TIME_CHUNK = 256            # Time samples per vectorised chunk / cancellation checkpoint
SIM_STEP_COUNT_EPSILON = 1e-9   # Guards floor(duration / step) against 4.9999999 style results
SIM_RADIUS_TOLERANCE = 1e-9     # Relative slack when keeping grid nodes on the wafer edge

# --- Playback Parameters ---
PLAYBACK_FRAME_DT = 0.1         # Simulated seconds per animation tick at speed 1.0
DEFAULT_ANIMATION_SPEED = 1.0
DEFAULT_TRAIL_LENGTH = 200
DEFAULT_ACTIVE_FRAME = FRAME_LOWER

# --- Logging ---
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
