"""Process-wide record/playback mode"""

import logging
import threading
from typing import Union

from ..core.exceptions import InvalidModeError
from ..models.mode import ProxyMode

logger = logging.getLogger(__name__)


class ModeController:
    """
    Holds the current proxy mode.

    Exactly two states exist, ``record`` and ``playback``; both transitions
    are legal from either state and anything else is rejected with the state
    left unchanged.
    """

    def __init__(self, default_mode: Union[ProxyMode, str] = ProxyMode.PLAYBACK):
        self._mode = self._parse(default_mode)
        self._lock = threading.Lock()

    def get_mode(self) -> ProxyMode:
        """Get the current mode"""
        with self._lock:
            return self._mode

    def set_mode(self, mode: Union[ProxyMode, str]) -> ProxyMode:
        """
        Switch to the given mode.

        Args:
            mode: ``record`` or ``playback``

        Returns:
            The mode now in effect

        Raises:
            InvalidModeError: If mode is not one of the two legal values
        """
        new_mode = self._parse(mode)
        with self._lock:
            previous, self._mode = self._mode, new_mode

        if previous != new_mode:
            logger.info(f"Switched mode: {previous.value} -> {new_mode.value}")
        return new_mode

    @staticmethod
    def _parse(mode: Union[ProxyMode, str]) -> ProxyMode:
        if isinstance(mode, ProxyMode):
            return mode
        try:
            return ProxyMode(mode)
        except ValueError:
            raise InvalidModeError(str(mode))
