from __future__ import annotations


class DigitizerError(Exception):
    """Base class for errors reported to the user for a single action."""

    title = "Error"


class InvalidCalibration(DigitizerError):
    title = "Calibration"


class InvalidInput(DigitizerError):
    title = "Invalid input"


class EmptyCrop(DigitizerError):
    title = "Crop"
