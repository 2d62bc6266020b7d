# svgviewkit

Building blocks for a desktop SVG viewer, independent of any window toolkit.
The package reads SVG files, extracts their text runs with styling, prepares
markup for renderers without CSS support, manages extra system-menu items with
keyboard shortcuts, and runs background tick timers. It has no dependencies
outside the standard library.

## Modules

- `svgviewkit.svgtext`
  - `parse_svg_text_overlays(svg_text)` returns one `SvgTextOverlay` for each
    non-empty `<text>` element. Each overlay carries `text`, `x`, `y`,
    `font_size`, `bold`, `color` (a `Color` with `a`, `r`, `g`, `b`),
    `font_family` and `text_alignment` (a `TextAlignment`).
  - Styling is read from element attributes, from `<style>` class rules, from
    inline `style` attributes and from the CSS `font` shorthand. `<tspan>` and
    other inner tags are stripped, and the five predefined XML entities are
    decoded.
  - `inline_svg_class_styles(svg_text)` removes the first `<style>` block and
    copies its class rules into `style` attributes on the elements that use
    them.
  - Smaller helpers: `parse_css_declarations`, `parse_xml_attributes`,
    `decode_xml_entities` and `parse_svg_color`, which accepts `#rgb`,
    `#rrggbb`, `black` and `white`.
  - More helpers: `normalize_font_family_name`, `apply_font_shorthand`, which
    returns `(font_size, bold, font_family)`, `round_to_int`, `trim` and
    `get_font_size`.
- `svgviewkit.svgload`
  - `decode_svg_bytes(data)` decodes UTF-16LE with a BOM, or NUL-terminated
    UTF-8. For UTF-8 input it rewrites a `utf-8` encoding declaration to
    `utf-16`.
  - `prepare_svg(data)` returns a `PreparedSvg` holding the decoded `text`, the
    class-inlined `xml`, the `overlays` and `text_tag_count`. Its `summary`
    gives a one-line diagnostic.
  - `svg_document_size(text, fallback_width, fallback_height)` takes the root
    `<svg>` `width`/`height`. If those are missing it uses the `viewBox`, and
    otherwise the fallback.
  - `count_text_tags` and `format_overlay_log` produce diagnostics.
- `svgviewkit.document`
  - `SvgDocument.load_from_file(path)` reads a whole file into memory. The
    result is available as `svg_xml`, `path` and `empty`.
  - A failed load raises `DocumentError` and leaves the document empty.
  - `clear()` empties the document.
- `svgviewkit.sysmenu`
  - `MenuHost` keeps a list of `MenuItemSpec` items. Adding, inserting or
    updating an item validates it: ids must be non-zero and unique, text must
    be present, and shortcuts must be valid and free of conflicts.
  - `install(menu)` appends the items to a `Menu`. It registers their
    shortcuts in a process-wide registry, which is shared by every host with a
    different scope name.
  - `handle_command` and `handle_shortcut` invoke the matching item.
  - `ShortcutBinding` formats keys (`to_display_string`, e.g. `Ctrl+Alt+T`).
    `matches` tests a key-down message against a set of held keys.
  - Errors are raised as `MenuError`.
  - A host is a context manager. `close()` releases its shortcuts.
- `svgviewkit.timers`
  - `CallbackTimer.start(interval_ms, func)` calls `func` on a worker thread and
    then sleeps for the interval, repeating until `func` returns `False`.
  - `RenderTimer.start(interval_ns, callback)` is a re-armable one-shot timer
    that ticks until `callback` returns `False`. Calling `start` on a running
    timer replaces the interval and the callback.
  - Both timers have `stop()` and `is_running()`, and both work as context
    managers.

## Examples

```python
from svgviewkit.svgtext import parse_svg_text_overlays

svg = """
<svg width="200" height="100">
  <style>.title { font: bold 18px Georgia; fill: #336699 }</style>
  <text x="100" y="40" class="title" text-anchor="middle">Hello</text>
</svg>
"""
for item in parse_svg_text_overlays(svg):
    print(item.text, item.x, item.y, item.font_family, item.font_size, item.bold)
# Hello 100.0 40.0 Georgia 18.0 True
```

```python
from svgviewkit.document import SvgDocument
from svgviewkit.svgload import prepare_svg, svg_document_size

document = SvgDocument()
document.load_from_file("drawing.svg")
prepared = prepare_svg(document.svg_xml)
print(prepared.summary)
print(svg_document_size(prepared.text, 800, 600))
```

```python
from svgviewkit.sysmenu import (
    COMMAND_ABOUT, VK_F1, VK_MENU, WM_SYSKEYDOWN,
    Menu, MenuHost, MenuItemSpec, ShortcutBinding,
)

with MenuHost("MainFrame.SystemMenu") as host:
    host.add_item(MenuItemSpec(
        id=COMMAND_ABOUT,
        text="About",
        shortcut=ShortcutBinding(virtual_key=VK_F1, alt=True),
        on_invoke=lambda window: print("about"),
    ))
    menu = Menu()
    host.install(menu)
    print(menu.entry(COMMAND_ABOUT).text)                                 # "About\tAlt+F1"
    host.handle_shortcut(None, WM_SYSKEYDOWN, VK_F1, pressed={VK_MENU})   # prints "about"
```

## What it does not do

The package draws nothing and opens no windows. It also does not provide:

- a scroll or zoom model;
- drag panning or inertial scrolling;
- a main-window controller;
- a command-line program.

A GUI layer must supply the events and the rendering, and call these helpers
itself.

## Tests

```
pip install -e .[test]
pytest
```