# services/auth_service.py

import hashlib
import hmac
import re
from typing import Tuple

import config
from data_integrator import PIN_HASH_KEY, SHOW_COST_KEY, LocalStore
from domain.models import Role
from utils.logger import get_logger

logger = get_logger("auth_service")

PIN_PATTERN = re.compile(r"^\d{4,6}$")


def hash_pin(pin: str, salt: str = None) -> str:
    salt = config.PIN_SALT if salt is None else salt
    return hashlib.sha256((pin + salt).encode("utf-8")).hexdigest()


def validate_pin_format(pin: str) -> Tuple[bool, str]:
    if not pin:
        return False, "PIN không được để trống"
    if not PIN_PATTERN.match(pin):
        return False, "PIN phải từ 4-6 số"
    return True, ""


class PinGate:
    """
    Local owner PIN. The hash lives in the store; the current role lives
    with the caller (Streamlit session state).
    """

    def __init__(self, store: LocalStore):
        self.store = store

    def has_pin(self) -> bool:
        ok, _, stored = self.store.read(PIN_HASH_KEY)
        return ok and bool(stored)

    def setup(self, pin: str) -> Tuple[bool, str, Role]:
        """First unlock: store the PIN hash and grant the owner role."""
        if self.has_pin():
            return False, "PIN đã được thiết lập", Role.SALE

        is_valid, message = validate_pin_format(pin)
        if not is_valid:
            return False, message, Role.SALE

        ok, msg, _ = self.store.write(PIN_HASH_KEY, hash_pin(pin))
        if not ok:
            return False, msg, Role.SALE

        logger.info("Owner PIN set up")
        return True, "Đã thiết lập PIN chủ sở hữu thành công!", Role.OWNER

    def verify(self, pin: str) -> Tuple[bool, str, Role]:
        ok, msg, stored = self.store.read(PIN_HASH_KEY)
        if not ok:
            return False, msg, Role.SALE
        if not stored:
            return False, "Chưa thiết lập PIN", Role.SALE

        if hmac.compare_digest(hash_pin(pin or ""), stored):
            return True, "", Role.OWNER

        logger.warning("Wrong owner PIN entered")
        return False, "PIN không chính xác", Role.SALE

    def change_pin(self, new_pin: str, role: Role) -> Tuple[bool, str, None]:
        """Owner replaces the PIN; the old one stops working immediately."""
        if role is not Role.OWNER:
            return False, "Chỉ chủ shop được đổi PIN", None

        is_valid, message = validate_pin_format(new_pin)
        if not is_valid:
            return False, message, None

        ok, msg, _ = self.store.write(PIN_HASH_KEY, hash_pin(new_pin))
        if not ok:
            return False, msg, None

        logger.info("Owner PIN changed")
        return True, "Đã đổi mã PIN thành công!", None

    def get_show_cost(self) -> bool:
        _, _, value = self.store.read(SHOW_COST_KEY, default=True)
        return value is not False

    def set_show_cost(self, show: bool) -> Tuple[bool, str, bool]:
        return self.store.write(SHOW_COST_KEY, bool(show))

    def reset_all(self) -> Tuple[bool, str, None]:
        """Wipe the whole store: history, PIN and preferences."""
        ok, msg, _ = self.store.clear()
        if ok:
            logger.warning("All app data reset")
        return ok, msg, None
