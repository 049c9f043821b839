"""
Exclusive ownership of platform audio devices.

A device (one recognizer or one synthesizer object) can be driven by a single
handle at a time. Acquiring a device releases whichever handle held it before.
"""
from typing import ClassVar, Dict

from utils import get_logger

logger = get_logger(__name__)


class ExclusiveHandle:
    _holders: ClassVar[Dict[int, "ExclusiveHandle"]] = {}

    def __init__(self, device: object):
        self._device = device

    @property
    def device_key(self) -> int:
        return id(self._device)

    @property
    def is_holder(self) -> bool:
        return ExclusiveHandle._holders.get(self.device_key) is self

    def acquire(self) -> None:
        current = ExclusiveHandle._holders.get(self.device_key)
        if current is not None and current is not self:
            logger.debug("Releasing %s in favour of %s", type(current).__name__, type(self).__name__)
            current.on_preempted()
        ExclusiveHandle._holders[self.device_key] = self

    def release(self) -> None:
        if self.is_holder:
            del ExclusiveHandle._holders[self.device_key]

    def on_preempted(self) -> None:
        """Stop using the device. Called when another handle acquires it."""
        self.release()
