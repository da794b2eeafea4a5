"""Constants for the Recipe Box integration."""

DOMAIN = "recipe_box"

# Configuration and option keys
CONF_API_KEY = "api_key"
CONF_MODEL = "model"
CONF_DEFAULT_MODEL = "default_model"
CONF_PREFER_STRUCTURED_DATA = "prefer_structured_data"

# Default values
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT = 30
DEFAULT_MAX_RESPONSE_SIZE = 5 * 1024 * 1024
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_MAX_RETRIES = 3

# Available models
AVAILABLE_MODELS = [
    "gemini-2.5-flash",
    "gemini-2.5-flash-lite",
    "gemini-2.5-pro",
]

# Storage
STORAGE_KEY = f"{DOMAIN}.saved_recipes"
STORAGE_VERSION = 1

# Service names
SERVICE_EXTRACT = "extract"
SERVICE_SAVE = "save"
SERVICE_DELETE = "delete"
SERVICE_LIST = "list"
SERVICE_GET = "get"

# Event names
EVENT_EXTRACTION_STARTED = "recipe_box_extraction_started"
EVENT_RECIPE_EXTRACTED = "recipe_box_recipe_extracted"
EVENT_EXTRACTION_FAILED = "recipe_box_extraction_failed"
EVENT_RECIPE_SAVED = "recipe_box_recipe_saved"
EVENT_RECIPE_DELETED = "recipe_box_recipe_deleted"

# Service data keys
DATA_QUERY = "query"
DATA_MODEL = "model"
DATA_RECIPE = "recipe"
DATA_RECIPE_ID = "recipe_id"
DATA_ERROR = "error"

# User-facing messages
MSG_EMPTY_QUERY = "Please enter a valid URL."
MSG_EXTRACTION_FAILED = (
    "Failed to extract recipe. The URL might be invalid, or the page may not "
    "contain a recipe. Please try another one."
)
MSG_INVALID_FORMAT = "The AI returned an invalid format. Please try again."
MSG_RECIPE_NOT_FOUND = (
    "Could not find a valid recipe at the provided URL. The page might not "
    "contain a recipe, or it's in a format that could not be understood."
)
MSG_UNKNOWN_ERROR = (
    "An unknown error occurred while communicating with the AI service."
)
