"""Install and update third-party skill packages."""
