class C3Error(Exception):
    """
    Base class for tunnel exceptions.
    """


class ConfigurationError(C3Error, ValueError):
    """
    A configuration value is out of range or inconsistent.
    """


class TunnelDisposedError(C3Error):
    """
    An action was attempted on a tunnel which has been disposed.
    """
