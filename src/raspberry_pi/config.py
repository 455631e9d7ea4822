"""
Configuration constants for the autonomous robot.

All fixed field and hardware values in one place.
Runtime-tunable values live in params.py.
"""

# =============================================================================
# HARDWARE PORTS
# =============================================================================

# ESP32 (Drivetrain + jewel arm controller)
ESP32_PORT = "/dev/ttyUSB0"
ESP32_BAUDRATE = 115200

# Camera (marker + jewel color)
CAMERA_INDEX = 0
CAMERA_WIDTH = 640
CAMERA_HEIGHT = 480
CAMERA_FOV = 70  # degrees

# =============================================================================
# FIELD GEOMETRY (inches, robot-centric frame of the RED alliance)
# =============================================================================

# Positive y is the robot's forward at its starting position, positive x is
# its right. Reference offsets are mirrored across the x axis for BLUE.

# Width between the middle of adjacent cryptobox columns (game manual)
CRYPTOBOX_WIDTH = 7.63

# Start -> middle column of the cryptobox, starting closer to a field corner
CRYPTOBOX_POSITION_CORNER = (-2.0, 36.0)

# Start -> middle column of the cryptobox, starting away from the corner
CRYPTOBOX_POSITION_CENTERED = (12.0, -26.0)

# Rotation paired with each reference offset (degrees)
CORNER_ROTATION_DEG = 90.0
CENTERED_ROTATION_RED_DEG = 180.0
CENTERED_ROTATION_BLUE_DEG = 0.0

# Lateral shift from the start to where the jewel arm can be dropped.
# The starting point is lined up with the line between the jewels.
JEWEL_ACCESS_OFFSET = 0.3

# =============================================================================
# ROBOT GEOMETRY
# =============================================================================

# Mecanum drivetrain, center to wheel contact (inches)
TRACK_HALF_WIDTH = 7.0
WHEELBASE_HALF_LENGTH = 6.5

# Jewel flicker servo positions (degrees)
JEWEL_FLICK_CENTER = 90
JEWEL_FLICK_FORWARD = 150
JEWEL_FLICK_BACKWARD = 30

# Jewel arm servo positions (degrees)
JEWEL_ARM_UP = 10
JEWEL_ARM_DOWN = 100

# =============================================================================
# AUTONOMOUS MISSION
# =============================================================================

# Task weights share a budget of 85 points
TASK_BUDGET = 85.0
KNOCK_JEWEL_PRIORITY = 30.0 / TASK_BUDGET
PARK_PRIORITY = 10.0 / TASK_BUDGET
READ_MARKER_PRIORITY = 30.0 / TASK_BUDGET
PLACE_GLYPH_PRIORITY = 15.0 / TASK_BUDGET

# Estimated chance each task succeeds
KNOCK_JEWEL_RELIABILITY = 0.75
PARK_RELIABILITY = 0.9
READ_MARKER_RELIABILITY = 0.7
PLACE_GLYPH_RELIABILITY = 0.5

# Autonomous period length (seconds)
AUTONOMOUS_PERIOD = 30.0

# Default drivetrain power (0, 1]
MOTOR_POWER = 0.9

# =============================================================================
# WEB INTERFACE
# =============================================================================

WEB_HOST = "0.0.0.0"
WEB_PORT = 8080
