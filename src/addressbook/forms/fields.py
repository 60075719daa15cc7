import logging
from typing import Dict, Iterable, Mapping, Optional

logger = logging.getLogger(__name__)


class FieldStore:
    """Keyed string form state with a fixed set of field names.

    The key set is closed: it is captured from the defaults at construction
    and never grows or shrinks. Writing to an unknown name is a no-op.
    """

    def __init__(self, defaults: Mapping[str, Optional[str]]) -> None:
        self._defaults: Dict[str, str] = {
            name: _as_text(value) for name, value in defaults.items()
        }
        self._values: Dict[str, str] = dict(self._defaults)

    @property
    def names(self) -> Iterable[str]:
        return tuple(self._defaults)

    def set(self, name: str, value: Optional[str]) -> None:
        if name not in self._values:
            logger.debug("Ignoring update for unknown form field %r", name)
            return
        self._values[name] = _as_text(value)

    def get(self, name: str) -> str:
        return self._values[name]

    def get_all(self) -> Dict[str, str]:
        """Return a copy of the current values."""
        return dict(self._values)

    def reset(self) -> None:
        """Restore the values passed at construction."""
        self._values = dict(self._defaults)


def _as_text(value: Optional[str]) -> str:
    if value is None:
        return ""
    return str(value)
