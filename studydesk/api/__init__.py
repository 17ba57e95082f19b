"""REST API for the study desk."""
