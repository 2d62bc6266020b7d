"""System menu model with keyboard shortcuts and a process-wide shortcut registry."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Collection, Optional

COMMAND_WINDOW_TOPMOST = 0x1F10
COMMAND_ABOUT = 0x1F20

WM_KEYDOWN = 0x0100
WM_KEYUP = 0x0101
WM_SYSKEYDOWN = 0x0104

VK_TAB = 0x09
VK_RETURN = 0x0D
VK_SHIFT = 0x10
VK_CONTROL = 0x11
VK_MENU = 0x12
VK_SPACE = 0x20
VK_PRIOR = 0x21
VK_NEXT = 0x22
VK_END = 0x23
VK_HOME = 0x24
VK_INSERT = 0x2D
VK_DELETE = 0x2E
VK_LWIN = 0x5B
VK_RWIN = 0x5C
VK_F1 = 0x70
VK_F24 = 0x87
VK_LSHIFT = 0xA0
VK_RSHIFT = 0xA1
VK_LCONTROL = 0xA2
VK_RCONTROL = 0xA3
VK_LMENU = 0xA4
VK_RMENU = 0xA5

_MODIFIER_KEYS = frozenset(
    {
        0,
        VK_CONTROL,
        VK_MENU,
        VK_SHIFT,
        VK_LCONTROL,
        VK_RCONTROL,
        VK_LMENU,
        VK_RMENU,
        VK_LSHIFT,
        VK_RSHIFT,
        VK_LWIN,
        VK_RWIN,
    }
)

_NAMED_KEYS = {
    VK_INSERT: "Insert",
    VK_DELETE: "Delete",
    VK_HOME: "Home",
    VK_END: "End",
    VK_PRIOR: "PageUp",
    VK_NEXT: "PageDown",
    VK_SPACE: "Space",
    VK_RETURN: "Enter",
    VK_TAB: "Tab",
}


class MenuError(Exception):
    """Raised when a menu item or a menu installation is rejected."""


@dataclass(frozen=True)
class ShortcutBinding:
    """A key plus modifier combination that triggers a menu command."""

    virtual_key: int = 0
    ctrl: bool = False
    alt: bool = False
    shift: bool = False
    win: bool = False

    def is_valid(self) -> bool:
        """True unless the key is missing or is itself a modifier key."""
        return self.virtual_key not in _MODIFIER_KEYS

    def _modifiers(self) -> list[str]:
        return [
            name
            for name, active in (
                ("Ctrl", self.ctrl),
                ("Alt", self.alt),
                ("Shift", self.shift),
                ("Win", self.win),
            )
            if active
        ]

    def to_display_string(self) -> str:
        """Human-readable form such as 'Ctrl+Alt+T'."""
        prefix = "".join(name + "+" for name in self._modifiers())
        key = self.virtual_key
        if ord("A") <= key <= ord("Z") or ord("0") <= key <= ord("9"):
            return prefix + chr(key)
        if VK_F1 <= key <= VK_F24:
            return prefix + f"F{key - VK_F1 + 1}"
        return prefix + _NAMED_KEYS.get(key, f"VK_{key}")

    def to_normalized_key(self) -> str:
        """Canonical lower-case key used for conflict detection."""
        prefix = "".join(name.lower() + "+" for name in self._modifiers())
        return prefix + str(self.virtual_key)

    def matches(self, message: int, key: int, pressed: Collection[int]) -> bool:
        """Whether a key-down message for key, with the given keys held, triggers this binding."""
        if message not in (WM_KEYDOWN, WM_SYSKEYDOWN):
            return False
        if key != self.virtual_key:
            return False
        held = set(pressed)
        ctrl_pressed = bool(held & {VK_CONTROL, VK_LCONTROL, VK_RCONTROL})
        alt_pressed = bool(held & {VK_MENU, VK_LMENU, VK_RMENU})
        shift_pressed = bool(held & {VK_SHIFT, VK_LSHIFT, VK_RSHIFT})
        win_pressed = bool(held & {VK_LWIN, VK_RWIN})
        return (
            ctrl_pressed == self.ctrl
            and alt_pressed == self.alt
            and shift_pressed == self.shift
            and win_pressed == self.win
        )


@dataclass
class MenuItemSpec:
    """Description of one menu item and its behaviour."""

    id: int = 0
    text: str = ""
    shortcut: Optional[ShortcutBinding] = None
    bitmap: Any = None
    separator: bool = False
    on_invoke: Optional[Callable[[Any], None]] = None
    is_checked: Optional[Callable[[], bool]] = None
    is_enabled: Optional[Callable[[], bool]] = None


@dataclass
class _MenuEntry:
    id: int = 0
    text: str = ""
    separator: bool = False
    checked: bool = False
    enabled: bool = True
    bitmap: Any = None


class Menu:
    """An in-memory menu that items are installed into."""

    def __init__(self, capacity: Optional[int] = None) -> None:
        self.entries: list[_MenuEntry] = []
        self.capacity = capacity

    def __len__(self) -> int:
        return len(self.entries)

    def append(self, entry: _MenuEntry) -> None:
        """Add an entry at the end; raises MenuError when the menu is full."""
        if self.capacity is not None and len(self.entries) >= self.capacity:
            raise MenuError("Menu is full.")
        self.entries.append(entry)

    def entry(self, item_id: int) -> Optional[_MenuEntry]:
        """The first command entry with the given id, or None."""
        return next(
            (e for e in self.entries if not e.separator and e.id == item_id), None
        )


@dataclass
class _RegisteredShortcut:
    owner: str
    command_id: int
    label: str


_registry_lock = threading.Lock()
_shortcut_registry: dict[str, _RegisteredShortcut] = {}


def _build_menu_text(item: MenuItemSpec) -> str:
    if item.shortcut is not None:
        return item.text + "\t" + item.shortcut.to_display_string()
    return item.text


class MenuHost:
    """Owns a list of menu items, installs them into a menu and dispatches commands."""

    def __init__(self, scope_name: str) -> None:
        self.scope_name = scope_name
        self._items: list[MenuItemSpec] = []
        self._registered_keys: list[str] = []

    def __enter__(self) -> "MenuHost":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def items(self) -> tuple[MenuItemSpec, ...]:
        return tuple(self._items)

    def add_item(self, item: MenuItemSpec) -> None:
        """Append an item after validating it."""
        self.insert_item(len(self._items), item)

    def insert_item(self, index: int, item: MenuItemSpec) -> None:
        """Insert an item at index, clamped to the end of the list."""
        self._validate(item)
        self._items.insert(min(index, len(self._items)), item)

    def update_item(self, item_id: int, item: MenuItemSpec) -> None:
        """Replace the item with the given id."""
        position = self._index_of(item_id)
        if position is None:
            raise MenuError("Menu item was not found.")
        self._validate(item, ignored_id=item_id)
        self._items[position] = item

    def remove_item(self, item_id: int) -> bool:
        """Remove the first item with the given id; returns whether one was removed."""
        position = self._index_of(item_id)
        if position is None:
            return False
        del self._items[position]
        return True

    def find_item(self, item_id: int) -> Optional[MenuItemSpec]:
        position = self._index_of(item_id)
        return None if position is None else self._items[position]

    def clear(self) -> None:
        self._unregister_shortcuts()
        self._items.clear()

    def install(self, menu: Optional[Menu]) -> None:
        """Register shortcuts and append every item to menu."""
        if menu is None:
            raise MenuError("Menu handle is null.")

        self._unregister_shortcuts()
        self._register_shortcuts()

        for item in self._items:
            if item.separator:
                entry = _MenuEntry(separator=True)
            else:
                entry = _MenuEntry(
                    id=item.id, text=_build_menu_text(item), bitmap=item.bitmap
                )
            try:
                menu.append(entry)
            except MenuError as exc:
                raise MenuError("Failed to insert system menu item.") from exc

        self.refresh_state(menu)

    def refresh_state(self, menu: Optional[Menu]) -> None:
        """Update the checked and enabled state of the installed entries."""
        if menu is None:
            return
        for item in self._items:
            if item.separator:
                continue
            entry = menu.entry(item.id)
            if entry is None:
                continue
            entry.checked = item.is_checked() if item.is_checked else False
            entry.enabled = item.is_enabled() if item.is_enabled else True

    def handle_command(self, window: Any, command_id: int) -> bool:
        """Invoke the item for command_id; returns whether it was handled."""
        item = self.find_item(command_id)
        if item is None or item.separator or item.on_invoke is None:
            return False
        if item.is_enabled and not item.is_enabled():
            return False
        item.on_invoke(window)
        return True

    def handle_shortcut(
        self, window: Any, message: int, key: int, pressed: Collection[int]
    ) -> bool:
        """Invoke the first item whose shortcut matches; returns whether it was handled."""
        for item in self._items:
            if item.shortcut is None or item.separator:
                continue
            if not item.shortcut.matches(message, key, pressed):
                continue
            if item.is_enabled and not item.is_enabled():
                return False
            if item.on_invoke is not None:
                item.on_invoke(window)
                return True
        return False

    def close(self) -> None:
        """Release the shortcuts this host registered."""
        self._unregister_shortcuts()

    def _index_of(self, item_id: int) -> Optional[int]:
        return next(
            (pos for pos, item in enumerate(self._items) if item.id == item_id), None
        )

    def _validate(self, item: MenuItemSpec, ignored_id: Optional[int] = None) -> None:
        if item.separator:
            return
        if item.id == 0:
            raise MenuError("Menu command id must not be zero.")
        if not item.text:
            raise MenuError("Menu item text must not be empty.")

        for existing in self._items:
            if existing is item:
                continue
            if ignored_id is not None and existing.id == ignored_id:
                continue
            if not existing.separator and existing.id == item.id:
                raise MenuError("Menu command id conflict detected.")
            if (
                item.shortcut is not None
                and existing.shortcut is not None
                and item.shortcut.to_normalized_key()
                == existing.shortcut.to_normalized_key()
            ):
                raise MenuError("Shortcut conflict detected in the current menu model.")

        if item.shortcut is not None and not item.shortcut.is_valid():
            raise MenuError("Shortcut binding is invalid.")

    def _register_shortcuts(self) -> None:
        with _registry_lock:
            self._registered_keys.clear()
            for item in self._items:
                if item.shortcut is None:
                    continue
                key = item.shortcut.to_normalized_key()
                current = _shortcut_registry.get(key)
                if current is not None and current.owner != self.scope_name:
                    for registered in self._registered_keys:
                        _shortcut_registry.pop(registered, None)
                    self._registered_keys.clear()
                    raise MenuError(
                        "Shortcut conflicts with another menu in this process: "
                        + item.shortcut.to_display_string()
                    )
                _shortcut_registry[key] = _RegisteredShortcut(
                    self.scope_name, item.id, item.text
                )
                self._registered_keys.append(key)

    def _unregister_shortcuts(self) -> None:
        with _registry_lock:
            for key in self._registered_keys:
                current = _shortcut_registry.get(key)
                if current is not None and current.owner == self.scope_name:
                    del _shortcut_registry[key]
            self._registered_keys.clear()