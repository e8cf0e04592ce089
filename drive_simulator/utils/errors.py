"""Exception hierarchy for the drive simulator.

Geometry and decoding errors are strict and raised immediately. Geocoding and
routing failures abort a run. Imagery failures are recovered per waypoint by
the image selector and never reach the orchestrator's caller.
"""


class DriveSimulatorError(Exception):
    """Base class for all drive simulator errors."""


class InputError(DriveSimulatorError, ValueError):
    """Invalid user input: coordinates out of range, malformed pairs, bad spacing."""


class MalformedPolylineError(DriveSimulatorError, ValueError):
    """An encoded polyline ended inside a byte group or held an invalid character."""


class LookupFailure(DriveSimulatorError):
    """Geocoder or router transport failure, or a provider-reported error."""


class EmptyRouteError(DriveSimulatorError):
    """The router answered successfully but the route has no points."""


class ImageryProviderError(DriveSimulatorError):
    """The imagery provider rejected or failed a candidate search."""


class ConfigurationError(DriveSimulatorError, ValueError):
    """A provider was selected without the credentials it needs."""
