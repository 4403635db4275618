"""Domain errors shared by services and the API layer."""
