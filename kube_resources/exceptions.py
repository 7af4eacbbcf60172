from typing import Any


class ConstructResourceError(Exception):
    def __init__(self, msg: Any) -> None:
        super().__init__("error constructing kubernetes resource: " + str(msg))


class ResourceDeserializationError(Exception):
    def __init__(self, msg: Any) -> None:
        super().__init__("error deserializing resource: " + str(msg))


class InvalidDashboardJsonError(Exception):
    def __init__(self, msg: Any) -> None:
        super().__init__("invalid dashboard json: " + str(msg))
