"""
Exception taxonomy for the simulation engine.

Only configuration errors ever leave the engine. Degenerate numerics,
probability normalisation and exhausted bowler rotations are recovered
locally and never raised.
"""


class SimulationError(Exception):
    """Base class for everything the engine raises"""


class ConfigurationError(SimulationError):
    """Inputs the engine cannot simulate with. Fatal for the match attempt."""


class LineupError(ConfigurationError):
    """A side is missing, or its playing XI is not a valid 11-player lineup"""


class UnknownPitchError(ConfigurationError):
    def __init__(self, pitch_name: str):
        super().__init__(f"Unknown pitch type: {pitch_name!r}")
        self.pitch_name = pitch_name


class UnknownFormatError(ConfigurationError):
    def __init__(self, format_name: str):
        super().__init__(f"Unknown match format: {format_name!r}")
        self.format_name = format_name


class ProfileTableError(ConfigurationError):
    """A batting profile table is missing its Neutral fallback for some tier"""
