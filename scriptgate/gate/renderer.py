"""Escaped HTML view of a script — the RENDER branch body.

render_script_page() is pure: no I/O, no globals read at call time, and the
same arguments always produce byte-identical output. Every caller-supplied
value is passed through escape_html() before it reaches the markup, so the
characters & < > " from a script or a request path never appear raw.

The page is self-contained: inline CSS only, no scripts, no external fetches.
"""

from __future__ import annotations

from string import Template
from typing import Any

from scriptgate.constants import DEFAULT_SNIPPET_BASE_URL

# Ordered: "&" must be replaced first or the entities introduced by the later
# replacements would themselves be escaped again.
_HTML_ESCAPES: tuple[tuple[str, str], ...] = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
)

PAGE_TITLE = "Source Locker"
BRAND_NAME = "Kuronami Hub"

_SCRIPT_PAGE = Template("""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>$page_title — $file_name</title>
<style>
  :root{--bg1:#041226;--bg2:#071430;--bg3:#04192a}
  html,body{height:100%}
  body{
    margin:0;
    min-height:100%;
    display:flex;
    align-items:center;
    justify-content:center;
    padding:24px;
    background:linear-gradient(180deg,var(--bg1),var(--bg2),var(--bg3));
    color:#e6eef8;
    font-family:Inter,ui-sans-serif,system-ui,-apple-system,"Segoe UI",Roboto,"Helvetica Neue",Arial;
  }
  .wrap{width:100%;max-width:920px;display:flex;justify-content:center}
  .card{
    width:100%;
    max-width:720px;
    background:linear-gradient(180deg, rgba(6,24,48,0.95), rgba(3,20,40,0.90));
    border:1px solid rgba(15,23,42,0.7);
    box-shadow:0 10px 30px rgba(2,8,20,0.7);
    border-radius:12px;
    padding:20px;
  }
  .card-header{display:flex;flex-direction:column;gap:4px;margin-bottom:12px}
  .title{font-weight:700;font-size:18px}
  .file{color:#9fb0c8;font-size:13px}
  .code-wrap{
    margin-top:12px;
    border-radius:8px;
    overflow:auto;
    padding:12px;
    border:1px solid rgba(80,120,160,0.06);
    max-height:420px;
  }
  pre{
    margin:0;
    font-family:Consolas,Monaco,"Andale Mono","Ubuntu Mono",monospace;
    font-size:14px;
    line-height:1.5;
    color:#d6deeb;
    white-space:pre;
    tab-size:4;
  }
  .snippet{
    margin-top:12px;
    background:rgba(10,20,36,0.6);
    padding:10px 12px;
    border-radius:8px;
    font-family:Consolas,Monaco,"Andale Mono","Ubuntu Mono",monospace;
    color:#a8d0ff;
    font-size:13px;
    overflow-wrap:anywhere;
  }
  .muted{color:#9fb0c8;font-size:13px}
</style>
</head>
<body>
  <div class="wrap">
    <div class="card" role="main">
      <div class="card-header">
        <div class="title">$brand_name</div>
        <div class="file">$file_name</div>
      </div>

      <div class="muted">$page_title.</div>

      <div class="code-wrap"><pre>$file_contents</pre></div>

      <div class="snippet">$snippet</div>
    </div>
  </div>
</body>
</html>""")


def escape_html(value: Any) -> str:
    """Escape ``value`` for embedding in HTML text or a double-quoted attribute.

    Exactly four substitutions, in order: & < > ". Single quotes are left as-is.
    Non-string values are coerced with str() first.
    """
    text = str(value)
    for raw, entity in _HTML_ESCAPES:
        text = text.replace(raw, entity)
    return text


def build_loader_snippet(request_path: Any, base_url: str = DEFAULT_SNIPPET_BASE_URL) -> str:
    """Return the (unescaped) one-line loader snippet for ``request_path``."""
    return f'loadstring(game:HttpGet("{base_url}{request_path}"))()'


def render_script_page(
    request_path: Any,
    file_name: Any,
    file_contents: Any,
    base_url: str = DEFAULT_SNIPPET_BASE_URL,
) -> str:
    """Render the read-only HTML view of a script.

    Args:
        request_path:  Original request path; embedded in the loader snippet.
        file_name:     Display name (path relative to the root); used in the title.
        file_contents: Script text, embedded escaped inside a <pre> block.
        base_url:      Public base URL prefixed to ``request_path`` in the snippet.

    Returns:
        A complete HTML document. Never raises for any input; non-string
        arguments are coerced with str().
    """
    snippet = build_loader_snippet(request_path, base_url)
    return _SCRIPT_PAGE.substitute(
        page_title=PAGE_TITLE,
        brand_name=BRAND_NAME,
        file_name=escape_html(file_name),
        file_contents=escape_html(file_contents),
        snippet=escape_html(snippet),
    )
