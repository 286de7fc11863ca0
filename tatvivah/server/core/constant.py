"""Application-wide constants."""

PROJECT_NAME = "TatVivah API"
API_VERSION = "1.0.0"
API_V1_STR = "/v1"
