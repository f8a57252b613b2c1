from typing import Mapping, TypeVar

T = TypeVar("T", bound=Mapping)
U = TypeVar("U", bound=Mapping)


def resolve_config(config: T, default_config: U) -> U:
    """Overlay the keys of ``config`` that the defaults know about."""
    _config = dict(default_config)
    if config:
        for key in _config:
            if key in config:
                _config[key] = config[key]
    return _config  # type: ignore[return-value]
