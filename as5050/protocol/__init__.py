"""AS5050 frame codec and register read / write paths."""
