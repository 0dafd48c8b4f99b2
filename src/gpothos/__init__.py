"""gpothos - installer and launcher for the prebuilt gpothos-generator binary."""

__version__ = "0.1.0"
