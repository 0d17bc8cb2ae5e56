"""
Constants shared by the validation engine, the model codec and the façade.
"""

# Maximum nesting of fields/items rules (and of data values) that will be walked
DEFAULT_MAX_DEPTH = 32

# Model cache defaults
DEFAULT_CACHE_SIZE = 128
DEFAULT_CACHE_TTL = 300.0  # seconds

# Wire format
FUNCTION_MARKER = "function"
MARKER_KEY = "marker"
SOURCE_TEXT_KEY = "sourceText"

# Error field used for problems that are not tied to a data path
MODEL_FIELD = "model"
ROOT_FIELD = "(root)"

# Generic messages
REQUIRED_MESSAGE = "Field is required"
REQUIRED_BY_DEPENDENCY_MESSAGE = "Field is required based on dependencies"
