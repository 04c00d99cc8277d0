"""Domain Layer: ports and value objects shared by the core and infrastructure."""
