"""Shared HTML layout and formatting helpers for the feature pages."""
import base64
from html import escape
from typing import Optional

STYLE = """
body { margin: 0; font-family: -apple-system, "Segoe UI", Roboto, sans-serif; color: #18181b;
       background: linear-gradient(180deg, #f0f9ff 0%, #ffffff 50%, #f5f3ff 100%); }
main { max-width: 960px; margin: 0 auto; padding: 40px 16px; display: flex; flex-direction: column; gap: 32px; }
a.back { color: #0ea5e9; text-decoration: none; font-size: 14px; }
.brand { text-transform: uppercase; letter-spacing: .4em; font-size: 13px; color: #38bdf8; margin: 0; }
h1 { font-size: 36px; margin: 8px 0 0; }
.lead { color: #71717a; }
.card { background: rgba(255,255,255,.9); border-radius: 24px; padding: 24px;
        box-shadow: 0 20px 50px rgba(15,23,42,.06); }
.grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(260px, 1fr)); gap: 16px; }
.preview { min-height: 220px; display: flex; align-items: center; justify-content: center;
           border: 1px dashed #e4e4e7; border-radius: 16px; background: #fafafa; color: #a1a1aa; }
.preview img { max-height: 200px; max-width: 100%; border-radius: 8px; }
.error { background: #fff1f2; color: #e11d48; border-radius: 16px; padding: 8px 16px; }
.muted { color: #71717a; font-size: 14px; }
button { border: 0; border-radius: 999px; padding: 10px 24px; background: #0ea5e9; color: #fff;
         font-weight: 600; cursor: pointer; }
textarea { width: 100%; min-height: 160px; border-radius: 16px; border: 1px solid #fecdd3; padding: 12px; }
pre { max-height: 16rem; overflow: auto; background: #18181b; color: #d1fae5; padding: 12px; border-radius: 12px; }
"""


def format_size(size: Optional[int]) -> str:
    if not size:
        return "--"
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.2f} MB"


def data_url(payload: bytes, media_type: str) -> str:
    return f"data:{media_type};base64,{base64.b64encode(payload).decode('ascii')}"


def error_block(message: Optional[str]) -> str:
    if not message:
        return ""
    return f'<p class="error" role="alert">{escape(message)}</p>'


def preview_block(src: Optional[str], alt: str, placeholder: str) -> str:
    if not src:
        return f'<div class="preview"><p>{escape(placeholder)}</p></div>'
    return f'<div class="preview"><img src="{escape(src)}" alt="{escape(alt)}"></div>'


def bullet_list(items) -> str:
    return "<ul>" + "".join(f"<li>{escape(item)}</li>" for item in items) + "</ul>"


def page(title: str, body: str, *, lead: str = "", back: bool = True) -> str:
    back_link = '<div><a class="back" href="/">&larr; Back to home</a></div>' if back else ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{escape(title)} | ImagePro</title>
<style>{STYLE}</style>
</head>
<body>
<main>
{back_link}
<section style="text-align:center">
  <p class="brand">ImagePro</p>
  <h1>{escape(title)}</h1>
  <p class="lead">{escape(lead)}</p>
</section>
{body}
</main>
</body>
</html>"""
