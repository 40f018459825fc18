"""Small runtime helpers shared by the app and web entry points."""
