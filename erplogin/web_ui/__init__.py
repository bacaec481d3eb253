"""NiceGUI presentation layer for the login screen."""
