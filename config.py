"""Central configuration for neural detection postprocessing.

All tunable defaults are defined here with descriptive names. Per-model
values (normalization constants, decode thresholds) are grouped by model
family. Detectors copy these into their ModelConfig at construction time,
so changing a value here never affects an already-initialized detector.
"""

# =============================================================================
# NETWORK INPUT (BLOB) DEFAULTS
# =============================================================================

# Network input size (width, height) in pixels
DEFAULT_INPUT_SIZE = (640, 640)

# Per-channel pixel multiplier applied after mean subtraction
DEFAULT_SCALE = (1.0, 1.0, 1.0)

# Per-channel value subtracted from each pixel before scaling
DEFAULT_MEAN = (0.0, 0.0, 0.0)

# Pixel value used to fill the border when letterboxing
DEFAULT_PAD_VALUE = (0.0, 0.0, 0.0)

# Swap the red and blue channels while building the blob
DEFAULT_SWAP_RB = True

# Resize policy keyword: "raw", "crop" or "letterbox"
DEFAULT_RESIZE_MODE = "letterbox"

# =============================================================================
# THRESHOLDS
# =============================================================================

# Minimum confidence for a candidate to be kept (EAST, YOLOv8)
DEFAULT_CONFIDENCE_THRESHOLD = 0.5

# IoU above which a lower-confidence candidate is suppressed
DEFAULT_NMS_THRESHOLD = 0.4

# =============================================================================
# EAST
# =============================================================================

# Each output cell covers a 4x4 pixel region of the network input
EAST_STRIDE = 4.0

# Mean the pretrained EAST model expects (OpenCV text spotting tutorial)
EAST_MEAN = (123.68, 116.78, 103.94)

# =============================================================================
# CRAFT
# =============================================================================

# Text region score threshold (max score inside a component)
CRAFT_TEXT_THRESHOLD = 0.7

# Link (affinity) score threshold
CRAFT_LINK_THRESHOLD = 0.4

# Low-bound text score used to build the text mask
CRAFT_LOW_TEXT = 0.4

# Components smaller than this many pixels (at output resolution) are noise
CRAFT_MIN_COMPONENT_AREA = 10

# The pretrained model outputs score maps at half the input resolution.
# Empirical, tied to the CRAFT architecture; do not derive from tensor shapes.
CRAFT_OUTPUT_SCALE = 2.0

# Dilation heuristic: niter = floor(CRAFT_DILATION_FACTOR * sqrt(area * min(w, h) / (w * h)))
CRAFT_DILATION_FACTOR = 2.0

# ImageNet normalization used when CRAFT was trained
CRAFT_SCALE = (1.0 / (0.229 * 255.0), 1.0 / (0.224 * 255.0), 1.0 / (0.225 * 255.0))
CRAFT_MEAN = (0.485 * 255.0, 0.456 * 255.0, 0.406 * 255.0)

# =============================================================================
# YOLOv8
# =============================================================================

# YOLOv8 expects pixel values in [0, 1]
YOLOV8_SCALE = (1.0 / 255.0, 1.0 / 255.0, 1.0 / 255.0)

# Number of leading box columns (cx, cy, w, h) in each output row
YOLOV8_BOX_COLUMNS = 4

# =============================================================================
# SEQUENCE RECOGNITION (PARSeq)
# =============================================================================

# Characters recognized by the pretrained PARSeq model; index 0 of the
# network output is the end-of-sequence token, so output index i maps to
# PARSEQ_CHARSET[i - 1].
PARSEQ_CHARSET = (
    "0123456789"
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~"
)

# Maximum number of decoded positions (25 characters + end-of-sequence)
PARSEQ_POSITIONS = 26

# PARSeq normalizes pixels to [-1, 1]
PARSEQ_SCALE = (1.0 / 127.5, 1.0 / 127.5, 1.0 / 127.5)
PARSEQ_MEAN = (127.5, 127.5, 127.5)

# PARSeq input is 128x32
PARSEQ_INPUT_SIZE = (128, 32)

# =============================================================================
# ANNOTATION
# =============================================================================

# Box outline color (BGR) and thickness for annotated output images
ANNOTATION_COLOR = (0, 255, 0)
ANNOTATION_THICKNESS = 2

# Label font scale for annotated output images
ANNOTATION_FONT_SCALE = 0.6

# Padding ratio around a rotated ROI when cropping for recognition
ROI_PADDING_RATIO = 0.05

# =============================================================================
# COMPARISON
# =============================================================================

# Absolute tolerance used when comparing floating-point configuration values
CONFIG_FLOAT_TOLERANCE = 1e-9
