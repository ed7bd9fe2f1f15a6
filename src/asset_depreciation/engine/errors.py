class DepreciationError(Exception):
    """Base class for depreciation engine errors."""


class InvalidConfiguration(DepreciationError):
    """Asset parameters that cannot produce a depreciation schedule."""

    def __init__(self, message: str, asset_id: int | None = None):
        super().__init__(message)
        self.message = message
        self.asset_id = asset_id

    @property
    def kind(self) -> str:
        return "invalid_configuration"


class MethodUnsupported(InvalidConfiguration):
    """Depreciation method string the engine does not recognize."""

    def __init__(self, method: str, asset_id: int | None = None):
        super().__init__(f"Unsupported depreciation method: {method!r}", asset_id)
        self.method = method

    @property
    def kind(self) -> str:
        return "method_unsupported"
