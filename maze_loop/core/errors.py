class ConfigError(ValueError):
    pass


class PhaseTransitionError(RuntimeError):
    pass
