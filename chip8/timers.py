import logging

logger = logging.getLogger(__name__)


class Timers:
    """Delay and sound counters, decremented at 60Hz by the driver.

    The counters never go below zero and are never touched by instruction
    count, only by ``tick``.
    """

    def __init__(self):
        self.delay = 0
        self.sound = 0

    def reset(self):
        self.delay = 0
        self.sound = 0

    def tick(self):
        # Delay timer
        if self.delay > 0:
            self.delay -= 1
        # Sound timer
        if self.sound > 0:
            self.sound -= 1
            if self.sound == 0:
                logger.debug("Sound timer reached 0, beep stops")

    @property
    def sound_active(self):
        return self.sound > 0
