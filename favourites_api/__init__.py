"""In-memory favourites service for charts, insights and audiences."""

__version__ = "0.1.0"
