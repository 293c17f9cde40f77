# utils/exceptions.py
# Central place for small custom exceptions used across the codebase.

class ShockBufferOverflowError(RuntimeError):
    """
    Raised when a shock buffer is asked to grow past its configured
    capacity. The sampler checks the depth bound before extending, so
    seeing this means a caller bypassed that check.
    """
    pass

class UnknownScenarioError(KeyError):
    """
    Raised when a scenario id is not present in *scenarios.yaml*
    (see scenarios.get_scenario).
    """
    pass
