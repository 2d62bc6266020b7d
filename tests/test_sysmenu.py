import pytest

from svgviewkit.sysmenu import (
    COMMAND_ABOUT,
    COMMAND_WINDOW_TOPMOST,
    VK_CONTROL,
    VK_F1,
    VK_MENU,
    VK_PRIOR,
    VK_SHIFT,
    WM_KEYDOWN,
    WM_KEYUP,
    WM_SYSKEYDOWN,
    Menu,
    MenuError,
    MenuHost,
    MenuItemSpec,
    ShortcutBinding,
)

TOPMOST_KEY = ShortcutBinding(virtual_key=ord("T"), ctrl=True, alt=True)
ABOUT_KEY = ShortcutBinding(virtual_key=VK_F1, alt=True)


def make_items(log, state):
    topmost = MenuItemSpec(
        id=COMMAND_WINDOW_TOPMOST,
        text="Top",
        shortcut=TOPMOST_KEY,
        on_invoke=lambda w: log.append(("top", w)),
        is_checked=lambda: state["top"],
        is_enabled=lambda: state["enabled"],
    )
    about = MenuItemSpec(
        id=COMMAND_ABOUT,
        text="About",
        shortcut=ABOUT_KEY,
        on_invoke=lambda w: log.append(("about", w)),
    )
    return [MenuItemSpec(separator=True), topmost, about]


def test_is_valid_rejects_modifiers_and_zero():
    assert not ShortcutBinding().is_valid()
    assert not ShortcutBinding(virtual_key=VK_SHIFT).is_valid()
    assert ShortcutBinding(virtual_key=ord("T")).is_valid()


def test_display_strings():
    assert TOPMOST_KEY.to_display_string() == "Ctrl+Alt+T"
    assert ABOUT_KEY.to_display_string() == "Alt+F1"
    assert ShortcutBinding(virtual_key=VK_PRIOR).to_display_string() == "PageUp"
    assert ShortcutBinding(virtual_key=ord("7"), shift=True).to_display_string() == "Shift+7"


def test_normalized_key_contains_key_code():
    assert TOPMOST_KEY.to_normalized_key() == "ctrl+alt+" + str(ord("T"))


def test_matches_requires_exact_modifiers():
    key = ord("T")
    assert TOPMOST_KEY.matches(WM_KEYDOWN, key, {VK_CONTROL, VK_MENU})
    assert TOPMOST_KEY.matches(WM_SYSKEYDOWN, key, {VK_CONTROL, VK_MENU})
    assert not TOPMOST_KEY.matches(WM_KEYDOWN, key, {VK_CONTROL})
    assert not TOPMOST_KEY.matches(WM_KEYDOWN, key, {VK_CONTROL, VK_MENU, VK_SHIFT})
    assert not TOPMOST_KEY.matches(WM_KEYUP, key, {VK_CONTROL, VK_MENU})
    assert not TOPMOST_KEY.matches(WM_KEYDOWN, ord("U"), {VK_CONTROL, VK_MENU})


@pytest.mark.parametrize(
    "item",
    [
        MenuItemSpec(id=0, text="x"),
        MenuItemSpec(id=5, text=""),
        MenuItemSpec(id=5, text="x", shortcut=ShortcutBinding(virtual_key=VK_CONTROL)),
    ],
)
def test_invalid_items_rejected(item):
    with MenuHost("validate-scope") as host:
        with pytest.raises(MenuError):
            host.add_item(item)
        assert host.items == ()


def test_conflicts_detected():
    with MenuHost("conflict-scope") as host:
        host.add_item(MenuItemSpec(id=10, text="a", shortcut=ABOUT_KEY))
        with pytest.raises(MenuError, match="id conflict"):
            host.add_item(MenuItemSpec(id=10, text="b"))
        with pytest.raises(MenuError, match="Shortcut conflict"):
            host.add_item(MenuItemSpec(id=11, text="b", shortcut=ABOUT_KEY))
        host.add_item(MenuItemSpec(separator=True))
        assert len(host.items) == 2


def test_insert_clamps_index_and_remove():
    with MenuHost("insert-scope") as host:
        host.add_item(MenuItemSpec(id=1, text="a"))
        host.insert_item(99, MenuItemSpec(id=2, text="b"))
        host.insert_item(0, MenuItemSpec(id=3, text="c"))
        assert [i.id for i in host.items] == [3, 1, 2]
        assert host.remove_item(1)
        assert not host.remove_item(1)
        assert host.find_item(1) is None
        assert host.find_item(2).text == "b"


def test_update_item():
    with MenuHost("update-scope") as host:
        host.add_item(MenuItemSpec(id=1, text="a", shortcut=ABOUT_KEY))
        host.update_item(1, MenuItemSpec(id=1, text="renamed", shortcut=ABOUT_KEY))
        assert host.find_item(1).text == "renamed"
        with pytest.raises(MenuError, match="not found"):
            host.update_item(42, MenuItemSpec(id=42, text="x"))


def test_install_builds_entries_and_state():
    log, state = [], {"top": True, "enabled": False}
    with MenuHost("install-scope") as host:
        for item in make_items(log, state):
            host.add_item(item)
        menu = Menu()
        host.install(menu)
        assert len(menu) == 3
        assert menu.entries[0].separator
        assert menu.entry(COMMAND_ABOUT).text == "About\t" + ABOUT_KEY.to_display_string()
        top = menu.entry(COMMAND_WINDOW_TOPMOST)
        assert top.checked and not top.enabled
        state["top"], state["enabled"] = False, True
        host.refresh_state(menu)
        assert not top.checked and top.enabled


def test_install_errors():
    with MenuHost("null-scope") as host:
        with pytest.raises(MenuError, match="null"):
            host.install(None)
    with MenuHost("full-scope") as host:
        host.add_item(MenuItemSpec(id=1, text="a"))
        host.add_item(MenuItemSpec(id=2, text="b"))
        with pytest.raises(MenuError, match="Failed to insert"):
            host.install(Menu(capacity=1))


def test_handle_command():
    log, state = [], {"top": False, "enabled": True}
    with MenuHost("command-scope") as host:
        for item in make_items(log, state):
            host.add_item(item)
        assert host.handle_command("wnd", COMMAND_ABOUT)
        assert not host.handle_command("wnd", 12345)
        state["enabled"] = False
        assert not host.handle_command("wnd", COMMAND_WINDOW_TOPMOST)
        assert log == [("about", "wnd")]


def test_handle_shortcut():
    log, state = [], {"top": False, "enabled": True}
    with MenuHost("shortcut-scope") as host:
        for item in make_items(log, state):
            host.add_item(item)
        assert host.handle_shortcut("w", WM_SYSKEYDOWN, VK_F1, {VK_MENU})
        assert host.handle_shortcut("w", WM_KEYDOWN, ord("T"), {VK_CONTROL, VK_MENU})
        assert not host.handle_shortcut("w", WM_KEYDOWN, ord("T"), {VK_CONTROL})
        state["enabled"] = False
        assert not host.handle_shortcut("w", WM_KEYDOWN, ord("T"), {VK_CONTROL, VK_MENU})
        assert log == [("about", "w"), ("top", "w")]


def test_registry_conflict_between_hosts():
    first = MenuHost("registry-a")
    second = MenuHost("registry-b")
    try:
        first.add_item(MenuItemSpec(id=1, text="a", shortcut=ABOUT_KEY))
        second.add_item(MenuItemSpec(id=1, text="b", shortcut=ABOUT_KEY))
        first.install(Menu())
        with pytest.raises(MenuError, match="another menu"):
            second.install(Menu())
        first.install(Menu())
        first.close()
        menu = Menu()
        second.install(menu)
        assert len(menu) == 1
    finally:
        first.close()
        second.close()


def test_clear_releases_shortcuts():
    first = MenuHost("clear-a")
    second = MenuHost("clear-b")
    try:
        first.add_item(MenuItemSpec(id=1, text="a", shortcut=TOPMOST_KEY))
        first.install(Menu())
        first.clear()
        assert first.items == ()
        second.add_item(MenuItemSpec(id=1, text="b", shortcut=TOPMOST_KEY))
        menu = Menu()
        second.install(menu)
        assert menu.entry(1).text.startswith("b\t")
    finally:
        first.close()
        second.close()