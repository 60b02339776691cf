from .models import EmbedView

_STYLE = """body {
  font-family: sans-serif;
  background: #111;
  color: #fff;
  padding: 2em;
}
img {
  max-width: 100%;
  height: auto;
  border-radius: 10px;
  margin-top: 1em;
}"""


# HTML builder - every text value in view is already escaped by the resolver
def render_embed_html(view: EmbedView) -> str:
    title_meta = (
        f'<meta property="og:title" content="{view.title.text}">'
        if view.title.show else ""
    )
    site_name_meta = (
        f'<meta property="og:site_name" content="{view.site_name.text}">'
        if view.site_name.show else ""
    )

    image_size_meta = ""
    if view.avatar.has_size:
        image_size_meta = (
            f'\n<meta property="og:image:width" content="{view.avatar.width}">'
            f'\n<meta property="og:image:height" content="{view.avatar.height}">'
        )

    heading = (
        f"<h1>{view.title.text}</h1>"
        if view.title.show and view.title.text else ""
    )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
{title_meta}
{site_name_meta}
<meta property="og:description" content="{view.description}">
<meta property="og:image" content="{view.image_url}">
{image_size_meta}
<meta name="theme-color" content="#{view.theme_color}">
<meta name="twitter:card" content="{view.card_type}">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{view.document_title}</title>
<style>
{_STYLE}
</style>
</head>
<body>
{heading}
<p>{view.description}</p>
<img src="{view.image_url}" alt="Embed Image">
</body>
</html>"""
