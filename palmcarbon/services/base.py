from __future__ import annotations

"""Service base class carrying shared configuration and a logger."""

import logging

from palmcarbon.core.config import ConfigManager
from palmcarbon.core.logger import Logger


class BaseService:
    """Base class for service helpers.

    Services receive their collaborators explicitly; nothing is looked up
    from module-level state.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        config: ConfigManager | None = None,
    ) -> None:
        self.logger = logger or Logger.get_logger(self.__class__.__module__)
        self.config = config or ConfigManager()
