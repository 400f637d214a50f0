"""noteleaf — publish markdown notes as leaflet documents."""

__version__ = "0.1.0"
