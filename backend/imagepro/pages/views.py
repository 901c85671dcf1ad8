"""Renderers for the landing page and the four feature pages. Each takes a PageState snapshot."""
from html import escape

from imagepro import config
from imagepro.pages.layout import bullet_list, data_url, error_block, format_size, page, preview_block
from imagepro.pages.state import PageState

ACCEPT = ",".join(config.ALLOWED_MEDIA_TYPES)

FEATURES = [
    ("compress", "Image compression", "Shrink image files while keeping them sharp.", "/compress"),
    ("remove-bg", "Background removal", "Detect the subject and cut out the background in one click.", "/remove-bg"),
    ("recognition", "Image recognition", "Let AI describe objects, text and scenes in a picture.", "/recognition"),
    ("ai-gen", "AI generation", "Turn a text description into a high quality picture.", "/ai-gen"),
]

COMPRESS_TIPS = [
    "Web images: 70%-80% quality balances clarity and size",
    "Social media: 60%-70% quality uploads faster",
    "Archives: 85%-95% quality keeps more detail",
    "PNG images are lossless, so lower quality has limited effect",
]

REMOVE_BG_TIPS = [
    "PNG / JPG / WebP are supported, including transparent layers",
    "A clear subject on a simple background gives the best result",
]

PROMPT_PRESETS = [
    "Hyper-realistic portrait, side light, film grain, warm tones, blurred background",
    "Trendy product poster, glass reflections, neon lights, blue and orange palette, 8K",
    "Fairy-tale forest, elves, misty morning light, soft colors, cinematic composition",
]

DEFAULT_PROMPT = (
    "Interstellar journey, a black hole jet, a retro train bursting out of the black hole, "
    "high contrast lighting, cinematic texture, motion blur, exaggerated wide angle"
)


def _upload_field(label: str) -> str:
    return (
        f'<label class="muted">{escape(label)} '
        f'(JPG, PNG, WebP, up to {config.MAX_IMAGE_SIZE_MB}MB)<br>'
        f'<input type="file" name="image_file" accept="{ACCEPT}" required></label>'
    )


def _submit(label: str, state: PageState) -> str:
    disabled = " disabled" if state.in_flight else ""
    return f'<button type="submit"{disabled}>{escape(label)}</button>'


def render_landing() -> str:
    cards = "".join(
        f'<a class="card" id="{key}" href="{href}" style="text-decoration:none;color:inherit">'
        f"<h3>{escape(title)}</h3><p class=\"muted\">{escape(description)}</p></a>"
        for key, title, description, href in FEATURES
    )
    body = f'<section class="grid">{cards}</section>'
    return page("Image toolbox", body, lead="Compress, cut out, recognize and generate images.", back=False)


def render_compress(state: PageState, quality_percent: int = config.DEFAULT_QUALITY_PERCENT) -> str:
    source = state.source
    result = state.result
    original_src = data_url(source.payload, source.media_type) if source else None
    original_meta = f"{format_size(source.size)}" if source else "--"
    if result is not None:
        compressed_src = data_url(result.payload, result.media_type)
        compressed_meta = f"{format_size(result.size)} &middot; {result.width} &times; {result.height}px"
        download = (
            f'<p><a href="{compressed_src}" download="{escape(result.download_name(source.filename))}">'
            f"Download compressed image</a> &middot; saved {result.saved_percent(source.size)}%</p>"
        )
    else:
        compressed_src, compressed_meta, download = None, "--", ""

    body = f"""
<section class="card">
  <form method="post" action="/compress" enctype="multipart/form-data">
    {_upload_field("Drop an image here or click to choose")}
    <p><label class="muted">Quality: <output>{quality_percent}%</output><br>
      <input type="range" name="quality" min="{config.MIN_QUALITY_PERCENT}" max="100"
             step="{config.QUALITY_STEP_PERCENT}" value="{quality_percent}"></label></p>
    {_submit("Compress", state)}
  </form>
  {error_block(state.error)}
</section>
<section class="grid">
  <div class="card"><p class="muted">Original &middot; {original_meta}</p>
    {preview_block(original_src, "Original", "Choose an image to start")}</div>
  <div class="card"><p class="muted">Compressed &middot; {compressed_meta}</p>
    {preview_block(compressed_src, "Compressed", "The compressed result appears here")}
    {download}</div>
</section>
<section class="card"><h2>Tips</h2>{bullet_list(COMPRESS_TIPS)}</section>
"""
    return page(
        "Image compression",
        body,
        lead="Reduce file size substantially while keeping the picture crisp.",
    )


def render_remove_bg(state: PageState) -> str:
    source = state.source
    result = state.result
    original_src = data_url(source.payload, source.media_type) if source else None
    if result is not None:
        result_src = data_url(result.payload, result.media_type)
        download = (
            f'<p><a href="{result_src}" download="{escape(result.download_name(source.filename))}">'
            f"Download PNG</a> &middot; {format_size(result.size)}</p>"
        )
    else:
        result_src, download = None, ""
    current = (
        f'<p class="muted">Current image: {escape(source.filename)} &middot; {format_size(source.size)}</p>'
        if source else ""
    )
    body = f"""
<section class="card">
  <form method="post" action="/remove-bg" enctype="multipart/form-data">
    {_upload_field("Drop an image here or click to choose")}
    {_submit("Remove background", state)}
  </form>
  {current}
  {error_block(state.error)}
</section>
<section class="grid">
  <div class="card"><p class="muted">Original</p>{preview_block(original_src, "Original", "No image yet")}</div>
  <div class="card"><p class="muted">Cut-out</p>
    {preview_block(result_src, "Background removed", "The cut-out appears here")}{download}</div>
</section>
<section class="card"><h2>Tips</h2>{bullet_list(REMOVE_BG_TIPS)}</section>
"""
    return page("Background removal", body, lead="Cut out the subject and get a transparent PNG.")


def render_recognition(state: PageState) -> str:
    source = state.source
    summary = state.result
    original_src = data_url(source.payload, source.media_type) if source else None
    details = (
        f'<p class="muted">{escape(source.filename)} &middot; {format_size(source.size)} &middot; {escape(source.media_type)}</p>'
        if source else ""
    )
    if summary is not None:
        result_html = f'<p style="white-space:pre-wrap">{escape(summary.display_text)}</p>'
        raw_html = (
            f"<details><summary>View raw response</summary><pre>{escape(summary.raw_json)}</pre></details>"
        )
    else:
        result_html = '<p class="muted">Upload an image and press "Recognize" to see the result</p>'
        raw_html = ""
    body = f"""
<section class="grid">
  <div class="card">
    <form method="post" action="/recognition" enctype="multipart/form-data">
      {_upload_field("Image to recognize")}
      {_submit("Recognize", state)}
    </form>
    {details}
    {preview_block(original_src, "Image to recognize", "Drop an image here or click to upload")}
  </div>
  <div class="card">
    <h2>Result</h2>
    {result_html}
    {error_block(state.error)}
    {raw_html}
  </div>
</section>
"""
    return page("Image recognition", body, lead="AI analysis of objects, text and scenes in your image.")


def render_ai_gen(
    state: PageState,
    prompt: str = DEFAULT_PROMPT,
    size: str = config.DEFAULT_GENERATION_SIZE,
    watermark: bool = True,
) -> str:
    image = state.result
    options = "".join(
        f'<option value="{escape(value)}"{" selected" if value == size else ""}>{escape(label)}</option>'
        for value, label in config.GENERATION_SIZES.items()
    )
    presets = bullet_list(PROMPT_PRESETS)
    meta = ""
    if image is not None:
        meta_lines = []
        if image.task_id:
            meta_lines.append(f"<p>Task ID: {escape(image.task_id)}</p>")
        if image.created_at:
            meta_lines.append(f"<p>Created: {image.created_at:%Y-%m-%d %H:%M:%S}</p>")
        meta = f'<div class="muted">{"".join(meta_lines)}</div>' if meta_lines else ""
    body = f"""
<section class="grid">
  <div class="card">
    <form method="post" action="/ai-gen">
      <p><label class="muted">Prompt<br><textarea name="prompt">{escape(prompt)}</textarea></label></p>
      <p><label class="muted">Output size <select name="size">{options}</select></label>
         <label class="muted"><input type="checkbox" name="watermark" value="true"{" checked" if watermark else ""}> Watermark</label></p>
      {_submit("Generate", state)}
    </form>
    <h3>Prompt ideas</h3>{presets}
  </div>
  <div class="card">
    <h2>Result</h2>
    {preview_block(image.src if image else None, "AI generated image", "The generated image appears here")}
    {meta}
    {error_block(state.error)}
  </div>
</section>
"""
    return page("AI generation", body, lead="Describe a picture and let a multimodal model paint it.")
