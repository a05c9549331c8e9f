"""File and process backed services composed by the control API."""
