"""Version 1 of the Scholaria API."""
