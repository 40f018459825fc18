"""NiceGUI web runtime."""
