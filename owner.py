import logging
from dataclasses import replace

from .datatypes import OwnerInfo
from .storage import StorageBinder

logger = logging.getLogger(__name__)

DEFAULT_OWNER_KEY = 'rentmate_owner'


class OwnerProfileStore:
    """The biller's own name, phone and UPI id, replaced wholesale on set()."""

    def __init__(self, binder: StorageBinder, key: str = DEFAULT_OWNER_KEY):
        self._binder = binder
        self._key = key
        self._info: OwnerInfo = binder.load(key, OwnerInfo(), OwnerInfo.from_dict)

    def get(self) -> OwnerInfo:
        return replace(self._info)

    def set(self, info: OwnerInfo) -> None:
        self._info = replace(info)
        self._binder.save(self._key, info, OwnerInfo.to_dict)
        logger.info("Saved owner info")
