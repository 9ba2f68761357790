class PhindError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(PhindError):
    # errors related to configuration (bad option values, unreadable toml).
    pass

class StartPathError(PhindError):
    # the starting path does not exist, is not a directory, or is not accessible.
    pass

class DiscoveryError(PhindError):
    # errors while compiling patterns for discovery.
    pass

class OutputError(PhindError):
    # errors during output operations.
    pass
