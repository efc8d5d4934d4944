"""Request/response models. Field names are snake_case in Python and camelCase on the wire."""
