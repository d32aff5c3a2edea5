"""skillcrate command line interface."""
