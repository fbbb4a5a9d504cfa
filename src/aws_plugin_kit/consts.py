"""Constants shared by the plugin kit."""

MAX_AUTOCOMPLETE_RESULTS = 50

OPERATION_FINISHED_SUCCESSFULLY_MESSAGE = "Operation finished successfully!"

DEFAULT_ACCESS_KEY_LABEL = "AWS_ACCESS_KEY_ID"
DEFAULT_SECRET_KEY_LABEL = "AWS_SECRET_ACCESS_KEY"
DEFAULT_REGION_LABEL = "REGION"
