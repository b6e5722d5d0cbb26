"""REST front end for the tutorial video catalog."""
