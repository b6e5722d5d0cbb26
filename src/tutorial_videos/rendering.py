"""HTML rendering for embeds, player pages and the video card.

Attribute values written into the ``<tutorial-video-player>`` element only have
double quotes replaced by ``&quot;``. No other escaping is applied to titles and
descriptions on the player pages, so catalog text must not contain markup.
"""

import base64
import html

from tutorial_videos.exceptions import AssetUnavailableError
from tutorial_videos.models import EmbedSnippet, VideoRecord

YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{video_id}"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

IFRAME_ALLOW = (
    "accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture"
)

DEFAULT_TITLE = "Tutorial Video"

PLAYER_ELEMENT = "tutorial-video-player"


def embed_url(video_id: str) -> str:
    return YOUTUBE_EMBED_URL.format(video_id=video_id)


def render_embed(video_id: str) -> EmbedSnippet:
    """Build the 560x315 iframe embed for a video id.

    No catalog lookup happens here; callers look the id up first.
    """
    url = embed_url(video_id)
    code = (
        f'<iframe width="560" height="315" src="{url}" frameborder="0" '
        f'allow="{IFRAME_ALLOW}" allowfullscreen></iframe>'
    )
    return EmbedSnippet(embed_url=url, embed_code=code)


def escape_attribute(value: str) -> str:
    return value.replace('"', "&quot;")


def render_video_card(video_id: str, title: str | None = None, description: str | None = None) -> str:
    """Render the player element's markup as a plain string.

    Mirrors what the custom element draws into its shadow root, so hosts
    without the bundled script can mount the same card.
    """
    header = ""
    if title or description:
        parts = []
        if title:
            parts.append(f'<h3 class="video-title">{html.escape(title, quote=False)}</h3>')
        if description:
            parts.append(
                f'<p class="video-description">{html.escape(description, quote=False)}</p>'
            )
        header = f'<div class="video-header">{"".join(parts)}</div>'

    src = f"{embed_url(video_id)}?rel=0"
    watch = YOUTUBE_WATCH_URL.format(video_id=video_id)
    return (
        f'<div class="video-container">{header}'
        f'<div class="video-wrapper"><iframe src="{src}" allow="{IFRAME_ALLOW}" '
        f'allowfullscreen loading="lazy"></iframe></div>'
        f'<div class="video-link"><a href="{watch}" target="_blank" '
        f'rel="noopener noreferrer">Watch on YouTube</a></div>'
        f"</div>"
    )


def render_player_page(video: VideoRecord, bundled_script: str | None) -> str:
    """Render the full player page for a catalog record."""
    if bundled_script is None:
        raise AssetUnavailableError()

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{video.title}</title>
  <style>
    body {{
      margin: 0;
      padding: 20px;
      font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
      background: #f5f5f5;
    }}
    .container {{
      max-width: 900px;
      margin: 0 auto;
    }}
  </style>
</head>
<body>
  <div class="container">
    <{PLAYER_ELEMENT}
      video-id="{video.id}"
      title="{escape_attribute(video.title)}"
      description="{escape_attribute(video.description)}"
    ></{PLAYER_ELEMENT}>
    <noscript>{render_video_card(video.id, video.title, video.description)}</noscript>
  </div>

  <script type="module">
{bundled_script}
  </script>
</body>
</html>"""


def render_inline_player(
    video_id: str,
    title: str | None,
    description: str | None,
    bundled_script: str | None,
) -> str:
    """Render the standalone document returned inline by MCP tool calls.

    Title and description attributes are only written when supplied; the
    element falls back to its own defaults otherwise.
    """
    if bundled_script is None:
        raise AssetUnavailableError()

    attributes = [f'video-id="{video_id}"']
    if title:
        attributes.append(f'title="{escape_attribute(title)}"')
    if description:
        attributes.append(f'description="{escape_attribute(description)}"')
    attrs = "\n    ".join(attributes)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title or DEFAULT_TITLE}</title>
</head>
<body>
  <{PLAYER_ELEMENT}
    {attrs}
  ></{PLAYER_ELEMENT}>

  <script type="module">
{bundled_script}
  </script>
</body>
</html>"""


def html_data_uri(document: str) -> str:
    encoded = base64.b64encode(document.encode("utf-8")).decode("ascii")
    return f"data:text/html;base64,{encoded}"


def render_not_found_page(video_id: str) -> str:
    return f"""<html>
  <body>
    <h1>Video not found</h1>
    <p>Video ID: {html.escape(video_id)}</p>
    <a href="/">Back to home</a>
  </body>
</html>"""


def render_bundle_missing_page() -> str:
    return """<html>
  <body>
    <h1>Error: Web component not loaded</h1>
    <p>Please run: tutorial-videos-build web</p>
  </body>
</html>"""
