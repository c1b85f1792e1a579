"""Version information for drupal-kit."""

__version__ = "0.1.0"
