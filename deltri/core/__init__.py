"""Implementation modules behind the flat ``deltri`` API."""
