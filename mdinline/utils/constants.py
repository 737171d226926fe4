APP_ORG = "QuickTools"
APP_NAME = "Markdown Inline Exporter"

CSS_PREVIEW = """
:root { --bg:#ffffff; --fg:#111; --muted:#555; --code:#f4f6f8; --border:#ddd; --link:#0b6bfd; }
html,body { background:var(--bg); color:var(--fg); }
body { font-family: -apple-system, Segoe UI, Roboto, Helvetica, Arial, sans-serif; margin: 1.25rem; line-height: 1.55; }
h1,h2,h3,h4,h5 { margin-top: 1.2em; }
pre { padding:.75rem; overflow:auto; border-radius:8px; background:var(--code); }
code { background:var(--code); padding:.15rem .3rem; border-radius:6px; }
blockquote { border-left:4px solid var(--border); margin:1em 0; padding:.25em .75em; color:var(--muted); }
table { border-collapse: collapse; }
th, td { border:1px solid var(--border); padding:.4rem .6rem; }
a { color:var(--link); text-decoration:none; } a:hover { text-decoration:underline; }
hr { border:none; border-top:1px solid var(--border); margin:1.5rem 0; }
ul,ol { padding-left:1.5rem; }
img { max-width:100%; }
.codehilite { position:relative; }
.copy-code-button { position:absolute; top:.4rem; right:.4rem; font-size:.75rem; }
"""

# Theme sheets layered over CSS_PREVIEW. Keys are theme ids.
THEME_CSS: dict[str, str] = {
    "default": "",
    "midnight": """
.theme-dark { --bg:#0f1115; --fg:#e7e9ee; --muted:#a0a4ae; --code:#1a1d24; --border:#2a2f3a; --link:#7aa2ff; }
""",
    "paper": """
.theme-light { --bg:#fbf8f1; --fg:#2b2b2b; --muted:#6b6458; --code:#f1ece0; --border:#ddd3c0; --link:#9a4d00; }
body { font-family: Georgia, "Times New Roman", serif; }
""",
}

THEME_LABELS: dict[str, str] = {
    "default": "Default",
    "midnight": "Midnight (Dark)",
    "paper": "Paper (Light)",
}

DARK_THEMES = frozenset({"midnight"})

# Class carried by the element that wraps rendered Markdown in the preview and the export sandbox.
PREVIEW_CONTAINER_CLASS = "markdown-preview-view"

HTML_TEMPLATE = """<!doctype html>
<html>
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width, initial-scale=1.0"/>
<style>{css}</style>
</head>
<body class="{body_classes}">
<div class="{container_class}">
{body}
</div>
</body>
</html>
"""

SETTINGS_GEOMETRY = "window/geometry"
SETTINGS_SPLITTER = "window/splitter"
SETTINGS_RECENTS = "file/recent"
SETTINGS_EXPORT = "export/settings"
MAX_RECENTS = 8

DEFAULT_PROFILE_NAME = "Default"

# Computed properties burned into inline style attributes, in output order.
PROPERTY_WHITELIST: tuple[str, ...] = (
    "color",
    "background-color",
    "font-family",
    "font-size",
    "font-weight",
    "font-style",
    "text-align",
    "text-decoration",
    "line-height",
    "padding",
    "padding-top",
    "padding-right",
    "padding-bottom",
    "padding-left",
    "margin",
    "margin-top",
    "margin-right",
    "margin-bottom",
    "margin-left",
    "border",
    "border-top",
    "border-right",
    "border-bottom",
    "border-left",
    "border-width",
    "border-style",
    "border-color",
    "list-style-type",
    "display",
    "vertical-align",
    "white-space",
    "box-sizing",
)

# Computed values that carry no information for a paste target.
ABSENT_VALUES = frozenset({"none", "normal", "auto"})

# Preview-only widgets that never belong in an exported artifact.
AFFORDANCE_SELECTORS: tuple[str, ...] = (
    ".copy-code-button",
    ".mdinline-affordance",
    "script",
)

MIME_TYPES: dict[str, str] = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "webp": "image/webp",
}
FALLBACK_MIME_TYPE = "application/octet-stream"

LOAD_TIMEOUT_MS = 15000
SANDBOX_WIDTH = 800
