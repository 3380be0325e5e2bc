class PodDiveError(Exception):
    """
    Base class for every failure that aborts a dive.
    The message is what the user sees, so it names the stage and a hint.
    """


class ConfigurationError(PodDiveError):
    pass


class PodNotFoundError(PodDiveError):
    pass


class PendingSchedulingError(PodDiveError):
    pass


class ClusterLookupError(PodDiveError):
    pass


class GatewayError(Exception):
    """
    Raised by a ClusterGateway when a query could not be answered.
    Pipeline stages translate it into one of the PodDiveError kinds.
    """
